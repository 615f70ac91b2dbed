from typing import List, Tuple

import cv2
import numpy as np


Color = Tuple[int, int, int]


class OverlayCanvas:
    # Transparent BGRA surface over the video. resize() drops the buffer and the transform.
    def __init__(self, width: int = 0, height: int = 0):
        self.image = np.zeros((0, 0, 4), dtype=np.uint8)
        self._transform = (1.0, 1.0, 0.0, 0.0)
        self._stack: List[Tuple[float, float, float, float]] = []
        self.resize(width, height)

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def resize(self, width: int, height: int) -> None:
        self.image = np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8)
        self._transform = (1.0, 1.0, 0.0, 0.0)
        self._stack = []

    def save(self) -> None:
        self._stack.append(self._transform)

    def restore(self) -> None:
        if self._stack:
            self._transform = self._stack.pop()

    def scale(self, sx: float, sy: float) -> None:
        a, d, e, f = self._transform
        self._transform = (a * sx, d * sy, e, f)

    def translate(self, tx: float, ty: float) -> None:
        # Translation happens in the already-scaled space.
        a, d, e, f = self._transform
        self._transform = (a, d, e + a * tx, f + d * ty)

    def is_identity(self) -> bool:
        return self._transform == (1.0, 1.0, 0.0, 0.0)

    def to_device(self, x: float, y: float) -> Tuple[float, float]:
        a, d, e, f = self._transform
        return a * x + e, d * y + f

    def clear(self) -> None:
        self.image[:] = 0

    def fill_circle(self, x: float, y: float, radius: int, color: Color) -> None:
        cx, cy = self.to_device(x, y)
        cv2.circle(self.image, (int(round(cx)), int(round(cy))), int(radius), (*color, 255), -1, cv2.LINE_AA)

    def stroke_line(self, x0: float, y0: float, x1: float, y1: float, color: Color, width: int) -> None:
        ax, ay = self.to_device(x0, y0)
        bx, by = self.to_device(x1, y1)
        cv2.line(
            self.image,
            (int(round(ax)), int(round(ay))),
            (int(round(bx)), int(round(by))),
            (*color, 255),
            int(width),
            cv2.LINE_AA,
        )


def compose(frame: np.ndarray, canvas: OverlayCanvas, mirror: bool = True) -> np.ndarray:
    out = cv2.flip(frame, 1) if mirror else frame.copy()
    height, width = out.shape[:2]
    if canvas.width != width or canvas.height != height:
        return out

    alpha = canvas.image[:, :, 3:4].astype(np.float32) / 255.0
    if not alpha.any():
        return out
    blended = canvas.image[:, :, :3].astype(np.float32) * alpha + out.astype(np.float32) * (1.0 - alpha)
    return blended.astype(np.uint8)
