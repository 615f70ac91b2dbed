from pose_types import Keypoint, Pose


ALIGNMENT_TOLERANCE_PX = 20.0


def vertical_delta(a: Keypoint, b: Keypoint) -> float:
    # Positive when a is lower (greater y) than b in image coordinates.
    return a.y - b.y


def is_aligned(pose: Pose, tolerance: float = ALIGNMENT_TOLERANCE_PX) -> bool:
    # Presence only, scores are ignored. A missing landmark means not aligned.
    left_shoulder = pose.find("left_shoulder")
    right_shoulder = pose.find("right_shoulder")
    left_hip = pose.find("left_hip")
    right_hip = pose.find("right_hip")

    if left_shoulder is None or right_shoulder is None or left_hip is None or right_hip is None:
        return False

    shoulder_diff = abs(vertical_delta(left_shoulder, right_shoulder))
    hip_diff = abs(vertical_delta(left_hip, right_hip))
    return shoulder_diff < tolerance and hip_diff < tolerance
