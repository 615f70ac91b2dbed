import logging
import os
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("rtsp://", "rtsps://", "udp://", "http://", "https://")

Source = Union[int, str]


class PermissionState(Enum):
    GRANTED = "granted"
    PROMPT = "prompt"
    DENIED = "denied"


class CaptureErrorKind(Enum):
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    ABORTED = "aborted"
    NOT_READABLE = "not_readable"
    OVERCONSTRAINED = "overconstrained"
    SECURITY = "security"
    OTHER = "other"


GENERIC_CAMERA_MESSAGE = "An error occurred while accessing the camera."

CAPTURE_ERROR_MESSAGES = {
    CaptureErrorKind.PERMISSION_DENIED: "Camera access was denied. Please allow camera access and try again.",
    CaptureErrorKind.NOT_FOUND: "No camera device found. Please ensure a camera is connected and try again.",
    CaptureErrorKind.ABORTED: "The fetching process for the media resource was aborted. Please try again.",
    CaptureErrorKind.NOT_READABLE: "The media device is not readable. Please check your camera and try again.",
    CaptureErrorKind.OVERCONSTRAINED: (
        "The constraints specified are not supported by the device. "
        "Please check your camera settings and try again."
    ),
    CaptureErrorKind.SECURITY: "Security error while accessing the camera. Please check your settings and try again.",
}


class CameraError(Exception):
    def __init__(self, kind: CaptureErrorKind, detail: str = ""):
        super().__init__(detail or kind.value)
        self.kind = kind


def describe_capture_error(error: BaseException) -> str:
    if isinstance(error, CameraError):
        return CAPTURE_ERROR_MESSAGES.get(error.kind, GENERIC_CAMERA_MESSAGE)
    return GENERIC_CAMERA_MESSAGE


def is_remote_source(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(REMOTE_SCHEMES)


@dataclass(frozen=True)
class VideoConstraints:
    source: Source = 0
    width: int = 1280
    height: int = 720
    target_fps: int = 30
    # Fail with OVERCONSTRAINED instead of accepting whatever size the device picks.
    exact_size: bool = False


@dataclass
class CameraFrame:
    frame: Optional[np.ndarray]
    timestamp: float
    ok: bool


class CameraStream:
    def __init__(
        self,
        source: Source = 0,
        width: int = 1280,
        height: int = 720,
        target_fps: int = 30,
        api_preference: int = cv2.CAP_ANY,
    ):
        self.source = source
        self.width = width
        self.height = height
        self.target_fps = target_fps
        self.api_preference = api_preference
        self._capture: Optional[cv2.VideoCapture] = None
        self._last_time = time.time()

    def open(self) -> bool:
        self._capture = cv2.VideoCapture(self.source, self.api_preference)
        if not self._capture.isOpened():
            return False
        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self._capture.set(cv2.CAP_PROP_FPS, self.target_fps)
        return True

    def frame_size(self) -> Tuple[int, int]:
        if self._capture is None:
            return 0, 0
        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return width, height

    def read(self) -> CameraFrame:
        if self._capture is None:
            return CameraFrame(None, time.time(), False)

        ok, frame = self._capture.read()
        # Failed reads are throttled too, so an exhausted file does not spin the UI thread.
        now = self._throttle(time.time())
        if not ok:
            return CameraFrame(None, now, False)
        return CameraFrame(frame, now, True)

    def _throttle(self, now: float) -> float:
        # FPS stabilization: sleep to keep processing close to target_fps.
        if self.target_fps > 0:
            min_frame_time = 1.0 / float(self.target_fps)
            elapsed = now - self._last_time
            if elapsed < min_frame_time:
                time.sleep(min_frame_time - elapsed)
                now = time.time()
        self._last_time = now
        return now

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None


class MediaDevices:
    # Local devices are judged by their node (/dev/videoN or a path). Remote URLs need allow_remote.
    def __init__(self, allow_remote: bool = False, warmup_frames: int = 10, device_root: Optional[str] = None):
        self.allow_remote = allow_remote
        self.warmup_frames = warmup_frames
        if device_root is None and sys.platform.startswith("linux"):
            device_root = "/dev"
        self.device_root = device_root
        self._abort = threading.Event()

    def device_path(self, source: Source) -> Optional[str]:
        if isinstance(source, int):
            if self.device_root is None:
                return None
            return os.path.join(self.device_root, f"video{source}")
        if is_remote_source(source):
            return None
        return source

    def query_permission(self, source: Source) -> PermissionState:
        path = self.device_path(source)
        if path is None:
            return PermissionState.PROMPT
        try:
            os.stat(path)
        except FileNotFoundError:
            return PermissionState.PROMPT
        if os.access(path, os.R_OK):
            return PermissionState.GRANTED
        return PermissionState.DENIED

    def abort(self) -> None:
        self._abort.set()

    def get_user_media(self, constraints: VideoConstraints) -> CameraStream:
        self._abort.clear()
        source = constraints.source
        if is_remote_source(source) and not self.allow_remote:
            raise CameraError(CaptureErrorKind.SECURITY, f"remote capture source refused: {source}")

        path = self.device_path(source)
        if path is not None:
            if not os.path.exists(path):
                raise CameraError(CaptureErrorKind.NOT_FOUND, f"no such device: {path}")
            if not os.access(path, os.R_OK):
                raise CameraError(CaptureErrorKind.PERMISSION_DENIED, f"device not readable: {path}")

        logger.info("Attempting to access the camera (source=%r)...", source)
        stream = CameraStream(source, constraints.width, constraints.height, constraints.target_fps)
        try:
            opened = stream.open()
        except PermissionError as e:
            stream.release()
            raise CameraError(CaptureErrorKind.PERMISSION_DENIED, str(e)) from e
        except cv2.error as e:
            stream.release()
            raise CameraError(CaptureErrorKind.NOT_READABLE, str(e)) from e

        if not opened:
            stream.release()
            kind = CaptureErrorKind.NOT_FOUND if path is None and isinstance(source, int) else CaptureErrorKind.NOT_READABLE
            raise CameraError(kind, f"could not open camera source {source!r}")

        try:
            self._check_size(stream, constraints)
            self._warm_up(stream)
        except CameraError:
            stream.release()
            raise

        width, height = stream.frame_size()
        logger.info("Camera stream opened (%dx%d)", width, height)
        return stream

    def _check_size(self, stream: CameraStream, constraints: VideoConstraints) -> None:
        if not constraints.exact_size:
            return
        actual = stream.frame_size()
        if actual != (constraints.width, constraints.height):
            raise CameraError(
                CaptureErrorKind.OVERCONSTRAINED,
                f"requested {constraints.width}x{constraints.height}, device gives {actual[0]}x{actual[1]}",
            )

    def _warm_up(self, stream: CameraStream) -> None:
        # Some drivers report opened but deliver nothing; wait for a first frame.
        for _ in range(max(1, self.warmup_frames)):
            if self._abort.is_set():
                raise CameraError(CaptureErrorKind.ABORTED, "camera acquisition aborted")
            if stream.read().ok:
                return
        raise CameraError(CaptureErrorKind.NOT_READABLE, "camera produced no frames")
