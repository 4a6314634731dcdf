from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

from hat_overlay.overlay.settings import OverlaySettings

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "run_overlay.py"


@pytest.fixture(scope="module")
def run_overlay():
    spec = importlib.util.spec_from_file_location("run_overlay", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_defaults_without_settings_file(run_overlay):
    args = run_overlay.build_parser().parse_args(["clip.mp4"])

    assert run_overlay.settings_from_args(args) == OverlaySettings()
    assert args.mirror is True
    assert args.save_json is True


def test_cli_overrides_layer_over_settings_file(run_overlay, tmp_path: Path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"scale": 1.5, "y_offset": 20, "smoothing": 0.8}), encoding="utf-8")

    args = run_overlay.build_parser().parse_args(
        ["clip.mp4", "--settings", str(settings_path), "--smoothing", "0.1", "--z-offset", "-5"]
    )
    settings = run_overlay.settings_from_args(args)

    assert settings == OverlaySettings(scale=1.5, y_offset=20.0, z_offset=-5.0, smoothing=0.1)


def test_cli_overrides_are_clamped(run_overlay):
    args = run_overlay.build_parser().parse_args(["clip.mp4", "--scale", "12", "--y-offset", "-400"])

    settings = run_overlay.settings_from_args(args)

    assert settings.scale == 5.0
    assert settings.y_offset == -100.0


def test_no_mirror_and_no_json_flags(run_overlay):
    args = run_overlay.build_parser().parse_args(["clip.mp4", "--no-mirror", "--no-json", "--verbose"])

    assert args.mirror is False
    assert args.save_json is False
    assert args.verbose is True
