import textwrap
from typing import List, Tuple

import cv2
import numpy as np


Rect = Tuple[int, int, int, int]

ERROR_TEXT_COLOR = (60, 60, 235)
BUTTON_COLOR = (192, 118, 25)


def draw_error_banner(frame, message: str, origin=(20, 40), wrap_width: int = 60) -> Rect:
    # Returns the Retry button rectangle (left, top, right, bottom).
    x, y = origin
    for line in textwrap.wrap(message, wrap_width) or [""]:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, ERROR_TEXT_COLOR, 2)
        y += 30

    left, top = x, y
    right, bottom = x + 120, y + 44
    cv2.rectangle(frame, (left, top), (right, bottom), BUTTON_COLOR, -1)
    cv2.putText(frame, "RETRY", (left + 22, top + 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, (255, 255, 255), 2)
    return left, top, right, bottom


def error_screen(message: str, size=(640, 480)) -> Tuple[np.ndarray, Rect]:
    width, height = size
    blank = np.zeros((height, width, 3), dtype=np.uint8)
    rect = draw_error_banner(blank, message)
    return blank, rect


def draw_status_panel(frame, lines: List[str], origin=(10, 30)) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        y += 28


def hit_test(rect: Rect, x: int, y: int) -> bool:
    left, top, right, bottom = rect
    return left <= x <= right and top <= y <= bottom
