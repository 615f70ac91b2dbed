from typing import Iterable, Optional, Tuple

from geometry import ALIGNMENT_TOLERANCE_PX, is_aligned
from pose_types import SKELETON_EDGES, Keypoint, Pose


# BGR equivalents of the CSS "green" and "red" named colors.
ALIGNED_COLOR: Tuple[int, int, int] = (0, 128, 0)
MISALIGNED_COLOR: Tuple[int, int, int] = (0, 0, 255)

SCORE_THRESHOLD = 0.5
KEYPOINT_RADIUS = 5
LINE_WIDTH = 2


def _visible(kp: Optional[Keypoint], threshold: float) -> bool:
    return kp is not None and kp.score > threshold


def pose_color(pose: Pose, tolerance: float = ALIGNMENT_TOLERANCE_PX) -> Tuple[int, int, int]:
    return ALIGNED_COLOR if is_aligned(pose, tolerance) else MISALIGNED_COLOR


def draw_keypoints(canvas, pose: Pose, color, threshold: float = SCORE_THRESHOLD, radius: int = KEYPOINT_RADIUS) -> None:
    for kp in pose.keypoints:
        if _visible(kp, threshold):
            canvas.fill_circle(kp.x, kp.y, radius, color)


def draw_skeleton(canvas, pose: Pose, color, threshold: float = SCORE_THRESHOLD, width: int = LINE_WIDTH) -> None:
    for name_a, name_b in SKELETON_EDGES:
        kp_a = pose.find(name_a)
        kp_b = pose.find(name_b)
        if not _visible(kp_a, threshold) or not _visible(kp_b, threshold):
            continue
        canvas.stroke_line(kp_a.x, kp_a.y, kp_b.x, kp_b.y, color, width)


def draw_pose(
    canvas,
    pose: Pose,
    threshold: float = SCORE_THRESHOLD,
    tolerance: float = ALIGNMENT_TOLERANCE_PX,
    radius: int = KEYPOINT_RADIUS,
    width: int = LINE_WIDTH,
) -> Tuple[int, int, int]:
    color = pose_color(pose, tolerance)
    draw_keypoints(canvas, pose, color, threshold=threshold, radius=radius)
    draw_skeleton(canvas, pose, color, threshold=threshold, width=width)
    return color


def draw_poses(canvas, poses: Iterable[Pose], render_config=None) -> None:
    # Each pose gets its own verdict; poses never influence each other's color.
    for pose in poses:
        if render_config is None:
            draw_pose(canvas, pose)
        else:
            draw_pose(
                canvas,
                pose,
                threshold=render_config.score_threshold,
                tolerance=render_config.alignment_tolerance_px,
                radius=render_config.keypoint_radius,
                width=render_config.line_width,
            )
