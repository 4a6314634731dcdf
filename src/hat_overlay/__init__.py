"""Head-tracked hat overlay for camera frames."""
