import logging
from abc import ABC, abstractmethod
from typing import List

import cv2

from pose_types import KEYPOINT_NAMES, Keypoint, Pose

logger = logging.getLogger(__name__)


class PoseEstimator(ABC):
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def estimate_poses(self, frame_bgr) -> List[Pose]: ...

    def close(self) -> None:
        pass


class MediaPipePoseEstimator(PoseEstimator):
    # Single person only. Visibility becomes the score; low-visibility landmarks are kept.
    def __init__(
        self,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ):
        try:
            import mediapipe as mp
        except ImportError as e:
            raise RuntimeError("MediaPipe is not installed; install the 'mediapipe' package.") from e

        self._mp_pose = mp.solutions.pose
        self._pose = self._mp_pose.Pose(
            static_image_mode=False,
            model_complexity=int(model_complexity),
            smooth_landmarks=True,
            enable_segmentation=False,
            min_detection_confidence=float(min_detection_confidence),
            min_tracking_confidence=float(min_tracking_confidence),
        )
        self._landmark_index = {
            name: int(self._mp_pose.PoseLandmark[name.upper()]) for name in KEYPOINT_NAMES
        }
        logger.info("MediaPipe pose model loaded (complexity=%d)", int(model_complexity))

    def name(self) -> str:
        return "mediapipe_pose"

    def estimate_poses(self, frame_bgr) -> List[Pose]:
        height, width = frame_bgr.shape[:2]
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self._pose.process(frame_rgb)
        if results.pose_landmarks is None:
            return []

        landmarks = results.pose_landmarks.landmark
        keypoints = []
        for name in KEYPOINT_NAMES:
            lm = landmarks[self._landmark_index[name]]
            keypoints.append(Keypoint(name, lm.x * width, lm.y * height, float(lm.visibility)))
        return [Pose(keypoints)]

    def close(self) -> None:
        if self._pose is not None:
            self._pose.close()
            self._pose = None
