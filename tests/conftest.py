from typing import Dict, List, Optional

import numpy as np
import pytest

from camera import CameraFrame, PermissionState
from pose_types import KEYPOINT_NAMES, Keypoint, Pose


DEFAULT_Y = {
    "left_shoulder": 100.0,
    "right_shoulder": 105.0,
    "left_hip": 200.0,
    "right_hip": 215.0,
}


def make_pose(y: Optional[Dict[str, float]] = None, scores: Optional[Dict[str, float]] = None, drop=()) -> Pose:
    y = {**DEFAULT_Y, **(y or {})}
    scores = scores or {}
    keypoints = []
    for idx, name in enumerate(KEYPOINT_NAMES):
        if name in drop:
            continue
        keypoints.append(Keypoint(name, 50.0 + idx * 10.0, y.get(name, 150.0 + idx), scores.get(name, 0.9)))
    return Pose(keypoints)


class RecordingCanvas:
    def __init__(self):
        self.circles = []
        self.lines = []

    def fill_circle(self, x, y, radius, color):
        self.circles.append((x, y, radius, color))

    def stroke_line(self, x0, y0, x1, y1, color, width):
        self.lines.append(((x0, y0), (x1, y1), color, width))


class FakeStream:
    def __init__(self, frames: Optional[List[Optional[np.ndarray]]] = None):
        self.frames = list(frames) if frames is not None else [np.zeros((48, 64, 3), dtype=np.uint8)]
        self.reads = 0
        self.released = False

    def read(self) -> CameraFrame:
        self.reads += 1
        frame = self.frames.pop(0) if len(self.frames) > 1 else self.frames[0]
        return CameraFrame(frame, float(self.reads), frame is not None)

    def release(self):
        self.released = True


class FakeEstimator:
    def __init__(self, poses: Optional[List[Pose]] = None, error: Optional[Exception] = None):
        self.poses = poses or []
        self.error = error
        self.calls = 0
        self.closed = False

    def name(self):
        return "fake"

    def estimate_poses(self, frame_bgr):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.poses

    def close(self):
        self.closed = True


class FakeDevices:
    def __init__(self, permission=PermissionState.GRANTED, permission_error=None, media_errors=None, frames=None):
        self.permission = permission
        self.permission_error = permission_error
        # Errors raised by successive get_user_media calls; None means success.
        self.media_errors = list(media_errors or [])
        self.frames = frames
        self.calls: List[str] = []
        self.streams: List[FakeStream] = []
        self.aborts = 0

    def query_permission(self, source):
        self.calls.append("query_permission")
        if self.permission_error is not None:
            raise self.permission_error
        return self.permission

    def get_user_media(self, constraints):
        self.calls.append("get_user_media")
        if self.media_errors:
            error = self.media_errors.pop(0)
            if error is not None:
                raise error
        stream = FakeStream(self.frames)
        self.streams.append(stream)
        return stream

    def abort(self):
        self.aborts += 1


@pytest.fixture
def frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)
