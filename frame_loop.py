import logging
from typing import Callable, Optional

from overlay import OverlayCanvas
from visualization import draw_poses

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class FrameScheduler:
    # One pending callback; the window loop calls run_pending() once per iteration.
    def __init__(self):
        self._pending: Optional[Callback] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def request(self, callback: Callback) -> None:
        self._pending = callback

    def cancel(self) -> None:
        self._pending = None

    def run_pending(self) -> bool:
        callback, self._pending = self._pending, None
        if callback is None:
            return False
        callback()
        return True


class FrameLoop:
    # The next tick is requested only after the current one has drawn, so estimations never overlap.
    def __init__(
        self,
        stream,
        estimator,
        schedule: Callable[[Callback], None],
        on_frame=None,
        on_error=None,
        render_config=None,
    ):
        self._stream = stream
        self._estimator = estimator
        self._schedule = schedule
        self._on_frame = on_frame
        self._on_error = on_error
        self._render_config = render_config
        self._stopped = True
        self.canvas = OverlayCanvas()
        self.frames_drawn = 0

    @property
    def running(self) -> bool:
        return not self._stopped

    def start(self) -> None:
        self._stopped = False
        self.tick()

    def stop(self) -> None:
        self._stopped = True

    def tick(self) -> None:
        if self._stopped:
            return
        try:
            self._process_frame()
        except Exception as e:
            logger.exception("Frame processing failed, stopping the loop")
            self._stopped = True
            if self._on_error is not None:
                self._on_error(e)
            return
        # on_frame may have torn the session down.
        if not self._stopped:
            self._schedule(self.tick)

    def _process_frame(self) -> bool:
        cam_frame = self._stream.read()
        if not cam_frame.ok:
            return False

        frame = cam_frame.frame
        height, width = frame.shape[:2]
        canvas = self.canvas
        canvas.resize(width, height)

        canvas.save()
        try:
            # The video is displayed mirrored, so draw mirrored too.
            canvas.scale(-1, 1)
            canvas.translate(-width, 0)
            poses = self._estimator.estimate_poses(frame)
            canvas.clear()
            draw_poses(canvas, poses, self._render_config)
        finally:
            canvas.restore()

        self.frames_drawn += 1
        if self._on_frame is not None:
            self._on_frame(frame, canvas)
        return True
