import logging
from typing import Callable, Optional

from camera import PermissionState, VideoConstraints, describe_capture_error
from frame_loop import FrameLoop

logger = logging.getLogger(__name__)

CAMERA_DENIED_MESSAGE = "Camera access is denied. Please enable camera permissions in your system settings."
PERMISSION_CHECK_MESSAGE = "Unable to check camera permissions. Please try again."
MODEL_LOAD_MESSAGE = "Error loading the pose estimation model."


class PoseSession:
    # permission check -> model load -> stream -> loop; any failure tears down and sets `error`.
    def __init__(
        self,
        devices,
        estimator_factory: Callable[[], object],
        constraints: VideoConstraints,
        schedule,
        on_frame=None,
        on_error: Optional[Callable[[str], None]] = None,
        render_config=None,
    ):
        self.devices = devices
        self.estimator_factory = estimator_factory
        self.constraints = constraints
        self._schedule = schedule
        self._on_frame = on_frame
        self._on_error = on_error
        self._render_config = render_config
        self.error: Optional[str] = None
        self.stream = None
        self.estimator = None
        self.loop: Optional[FrameLoop] = None

    @property
    def running(self) -> bool:
        return self.loop is not None and self.loop.running

    def start(self) -> None:
        self.error = None
        try:
            state = self.devices.query_permission(self.constraints.source)
        except Exception:
            logger.exception("Error checking camera permissions")
            self._fail(PERMISSION_CHECK_MESSAGE)
            return

        logger.info("Camera permission state: %s", state.value)
        if state == PermissionState.DENIED:
            self._fail(CAMERA_DENIED_MESSAGE)
            return
        if state == PermissionState.PROMPT:
            try:
                probe = self.devices.get_user_media(self.constraints)
            except Exception as e:
                self._fail(describe_capture_error(e), e)
                return
            # The probe only existed to get past the permission prompt.
            probe.release()

        self._load_model()

    def retry(self) -> None:
        logger.info("Retrying camera and model initialization")
        self.close()
        self.start()

    def close(self) -> None:
        if self.loop is not None:
            self.loop.stop()
            self.loop = None
        self.devices.abort()
        if self.stream is not None:
            self.stream.release()
            self.stream = None
        if self.estimator is not None:
            self.estimator.close()
            self.estimator = None

    def _load_model(self) -> None:
        try:
            self.estimator = self.estimator_factory()
        except Exception:
            logger.exception("Error loading the pose estimation model")
            self._fail(MODEL_LOAD_MESSAGE)
            return
        logger.info("Pose model ready: %s", self.estimator.name())
        self._start_video_stream()

    def _start_video_stream(self) -> None:
        try:
            self.stream = self.devices.get_user_media(self.constraints)
        except Exception as e:
            self._fail(describe_capture_error(e), e)
            return

        self.loop = FrameLoop(
            self.stream,
            self.estimator,
            self._schedule,
            on_frame=self._on_frame,
            on_error=self._on_loop_error,
            render_config=self._render_config,
        )
        self.loop.start()

    def _on_loop_error(self, error: BaseException) -> None:
        # Already logged by the loop.
        self._fail(describe_capture_error(error))

    def _fail(self, message: str, error: Optional[BaseException] = None) -> None:
        if error is not None:
            logger.error("Error accessing the webcam: %s", error, exc_info=error)
        self.close()
        self.error = message
        if self._on_error is not None:
            self._on_error(message)
