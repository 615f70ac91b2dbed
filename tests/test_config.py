import pytest

from app import build_session
from camera import VideoConstraints
from config import AppConfig, CameraConfig, parse_args
from frame_loop import FrameScheduler


def test_defaults():
    config = parse_args([])

    assert config == AppConfig()
    assert config.camera.constraints() == VideoConstraints(source=0, width=1280, height=720, target_fps=30)
    assert config.render.score_threshold == 0.5
    assert config.render.alignment_tolerance_px == 20.0


def test_flags_are_applied():
    config = parse_args(
        [
            "--source", "/dev/video2",
            "--width", "640",
            "--height", "480",
            "--fps", "15",
            "--exact-size",
            "--model-complexity", "0",
            "--tolerance", "12.5",
            "--log-level", "DEBUG",
        ]
    )

    assert config.camera.resolved_source() == "/dev/video2"
    assert config.camera.constraints().exact_size is True
    assert config.camera.constraints().target_fps == 15
    assert config.model.model_complexity == 0
    assert config.render.alignment_tolerance_px == 12.5
    assert config.log_level == "DEBUG"


def test_numeric_source_is_a_camera_index():
    assert CameraConfig(source="1").resolved_source() == 1


def test_invalid_model_complexity_is_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--model-complexity", "5"])


def test_build_session_wires_configuration():
    config = parse_args(["--source", "rtsp://cam.local/live", "--allow-remote", "--warmup-frames", "4"])
    session = build_session(config, FrameScheduler())

    assert session.devices.allow_remote is True
    assert session.devices.warmup_frames == 4
    assert session.constraints.source == "rtsp://cam.local/live"
    assert session.error is None
    assert not session.running
