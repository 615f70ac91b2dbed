import argparse
from dataclasses import dataclass, field
from typing import List, Optional

from camera import Source, VideoConstraints


@dataclass(frozen=True)
class CameraConfig:
    # Camera index ("0"), device path, or video file. Stream URLs need allow_remote.
    source: str = "0"
    width: int = 1280
    height: int = 720
    target_fps: int = 30
    exact_size: bool = False
    allow_remote: bool = False
    # Reads attempted after opening before the device is declared unreadable.
    warmup_frames: int = 10

    def resolved_source(self) -> Source:
        return int(self.source) if self.source.isdigit() else self.source

    def constraints(self) -> VideoConstraints:
        return VideoConstraints(
            source=self.resolved_source(),
            width=self.width,
            height=self.height,
            target_fps=self.target_fps,
            exact_size=self.exact_size,
        )


@dataclass(frozen=True)
class ModelConfig:
    # 0 = lite, 1 = full, 2 = heavy.
    model_complexity: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass(frozen=True)
class RenderConfig:
    score_threshold: float = 0.5
    alignment_tolerance_px: float = 20.0
    keypoint_radius: int = 5
    line_width: int = 2


@dataclass(frozen=True)
class AppConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    log_level: str = "INFO"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Webcam pose overlay with shoulder/hip alignment feedback")
    parser.add_argument("--source", type=str, default="0", help="Camera index, device path or video file")
    parser.add_argument("--width", type=int, default=1280, help="Requested frame width")
    parser.add_argument("--height", type=int, default=720, help="Requested frame height")
    parser.add_argument("--fps", type=int, default=30, help="Target frames per second (0 = unthrottled)")
    parser.add_argument("--exact-size", action="store_true", help="Fail if the camera cannot deliver the requested size")
    parser.add_argument("--allow-remote", action="store_true", help="Allow rtsp/http stream URLs as source")
    parser.add_argument("--warmup-frames", type=int, default=10, help="Reads to wait for a first frame")
    parser.add_argument("--model-complexity", type=int, choices=[0, 1, 2], default=1, help="Pose model size")
    parser.add_argument("--min-detection-confidence", type=float, default=0.5)
    parser.add_argument("--min-tracking-confidence", type=float, default=0.5)
    parser.add_argument("--score-threshold", type=float, default=0.5, help="Keypoints at or below this are not drawn")
    parser.add_argument("--tolerance", type=float, default=20.0, help="Max shoulder/hip height difference in pixels")
    parser.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_args(argv: Optional[List[str]] = None) -> AppConfig:
    args = build_arg_parser().parse_args(argv)
    return AppConfig(
        camera=CameraConfig(
            source=args.source,
            width=args.width,
            height=args.height,
            target_fps=args.fps,
            exact_size=args.exact_size,
            allow_remote=args.allow_remote,
            warmup_frames=args.warmup_frames,
        ),
        model=ModelConfig(
            model_complexity=args.model_complexity,
            min_detection_confidence=args.min_detection_confidence,
            min_tracking_confidence=args.min_tracking_confidence,
        ),
        render=RenderConfig(
            score_threshold=args.score_threshold,
            alignment_tolerance_px=args.tolerance,
        ),
        log_level=args.log_level,
    )
