"""CLI to composite the head-tracked hat overlay onto a video file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from hat_overlay.overlay.renderer import HatRenderer
from hat_overlay.overlay.settings import OverlaySettings, load_settings
from hat_overlay.service import OverlayDriver, TrackerNotReady, render_overlay_video

LOGGER = logging.getLogger("hat_overlay.scripts.run_overlay")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a head-tracked hat onto a video.")
    parser.add_argument("video", type=Path, help="Source video file.")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Destination video (default: <video>_overlay.mp4 next to the source).",
    )
    parser.add_argument("--settings", type=Path, default=None, help="JSON file with overlay settings.")
    parser.add_argument("--scale", type=float, default=None, help="Hat scale multiplier.")
    parser.add_argument("--y-offset", type=float, default=None, help="Vertical offset in UI units (1/100 scene unit).")
    parser.add_argument("--z-offset", type=float, default=None, help="Depth offset in UI units (1/100 scene unit).")
    parser.add_argument(
        "--smoothing",
        type=float,
        default=None,
        help="Smoothing strength in [0, 1]; 0 follows the raw pose exactly.",
    )
    parser.add_argument(
        "--no-mirror",
        dest="mirror",
        action="store_false",
        help="Do not mirror frames horizontally before drawing.",
    )
    parser.add_argument(
        "--no-json",
        dest="save_json",
        action="store_false",
        help="Disable writing overlay_transforms.json alongside the output.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser


def settings_from_args(args: argparse.Namespace) -> OverlaySettings:
    settings = load_settings(args.settings) if args.settings else OverlaySettings()
    overrides = {
        "scale": args.scale,
        "y_offset": args.y_offset,
        "z_offset": args.z_offset,
        "smoothing": args.smoothing,
    }
    return settings.updated(**{key: value for key, value in overrides.items() if value is not None})


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    configure_logging(verbose=args.verbose)
    driver = OverlayDriver(
        renderer=HatRenderer(mirror=args.mirror),
        settings=settings_from_args(args),
    )
    try:
        result = render_overlay_video(args.video, args.output, driver=driver, save_json=args.save_json)
    except TrackerNotReady as exc:
        parser.error(f"{exc}. Ensure mediapipe is installed in your environment (e.g. `pip install mediapipe`).")
    finally:
        driver.close()

    LOGGER.info(
        "Processed %d frames from %s (%d with overlay) -> %s",
        result.processed_frames,
        args.video,
        result.visible_frames,
        result.output_path,
    )


if __name__ == "__main__":
    main()
