"""Video input helpers for offline overlay runs."""

from .video_loader import VideoInfo, ensure_directory, iter_video_frames, probe_video

__all__ = ["VideoInfo", "ensure_directory", "iter_video_frames", "probe_video"]
