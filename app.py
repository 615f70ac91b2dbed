import logging
from functools import partial

import cv2

from camera import MediaDevices
from config import AppConfig, parse_args
from frame_loop import FrameScheduler
from overlay import compose
from pose_detection import MediaPipePoseEstimator
from session import PoseSession
from ui import draw_status_panel, error_screen, hit_test

logger = logging.getLogger("app")

WINDOW_NAME = "Pose Detection App"


def build_session(config: AppConfig, scheduler: FrameScheduler, on_frame=None, on_error=None) -> PoseSession:
    devices = MediaDevices(
        allow_remote=config.camera.allow_remote,
        warmup_frames=config.camera.warmup_frames,
    )
    estimator_factory = partial(
        MediaPipePoseEstimator,
        model_complexity=config.model.model_complexity,
        min_detection_confidence=config.model.min_detection_confidence,
        min_tracking_confidence=config.model.min_tracking_confidence,
    )
    return PoseSession(
        devices,
        estimator_factory,
        config.camera.constraints(),
        scheduler.request,
        on_frame=on_frame,
        on_error=on_error,
        render_config=config.render,
    )


def main(argv=None):
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    scheduler = FrameScheduler()
    view = {"image": None}

    def on_frame(frame, canvas):
        view["image"] = compose(frame, canvas)

    def on_error(message):
        view["image"] = None
        scheduler.cancel()

    session = build_session(config, scheduler, on_frame=on_frame, on_error=on_error)

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    click_state = {"x": None, "y": None}

    def on_mouse(event, x, y, flags, param):
        if event == cv2.EVENT_LBUTTONDOWN:
            click_state["x"] = x
            click_state["y"] = y

    cv2.setMouseCallback(WINDOW_NAME, on_mouse)
    logger.info("Starting main loop. Press 'q' to quit, 'r' to retry. Source: %s", config.camera.source)
    session.start()

    try:
        while True:
            if cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) < 1:
                break

            retry_requested = False
            if session.error is not None:
                screen, retry_rect = error_screen(session.error)
                cv2.imshow(WINDOW_NAME, screen)
                if click_state["x"] is not None and click_state["y"] is not None:
                    retry_requested = hit_test(retry_rect, click_state["x"], click_state["y"])
            else:
                scheduler.run_pending()
                if view["image"] is not None:
                    image = view["image"]
                    draw_status_panel(image, ["R: retry  Q: quit"], origin=(10, image.shape[0] - 12))
                    cv2.imshow(WINDOW_NAME, image)
                    view["image"] = None
            click_state["x"] = None
            click_state["y"] = None

            key = cv2.waitKey(1) & 0xFF
            if key in (ord("q"), 27):
                break
            if key == ord("r"):
                retry_requested = True
            if retry_requested:
                session.retry()
    finally:
        session.close()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
