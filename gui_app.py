import logging
import sys

import cv2
from PySide6 import QtCore, QtGui, QtWidgets

from app import build_session
from config import AppConfig, parse_args
from overlay import compose


FRAME_INTERVAL_MS = 16


class QtFrameScheduler:
    # Roughly display rate; a 0 ms timer would starve the Qt event loop.
    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS):
        self.interval_ms = interval_ms

    def request(self, callback) -> None:
        QtCore.QTimer.singleShot(self.interval_ms, callback)


class PoseDetectionWidget(QtWidgets.QWidget):
    def __init__(self, config: AppConfig, parent=None):
        super().__init__(parent)
        self._setup_ui()
        self._started = False
        self.scheduler = QtFrameScheduler()
        self.session = build_session(config, self.scheduler, on_frame=self._on_frame, on_error=self._on_error)

    def _setup_ui(self):
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self.error_box = QtWidgets.QFrame()
        error_layout = QtWidgets.QVBoxLayout(self.error_box)
        error_layout.setContentsMargins(0, 0, 0, 0)
        self.error_label = QtWidgets.QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setAlignment(QtCore.Qt.AlignCenter)
        self.error_label.setStyleSheet("color:#d32f2f;font-size:18px;font-weight:500;")
        self.retry_button = QtWidgets.QPushButton("Retry")
        self.retry_button.setStyleSheet(
            "QPushButton{background:#1976d2;color:white;padding:8px 22px;border-radius:4px;font-size:14px;}"
            "QPushButton:hover{background:#1565c0;}"
        )
        self.retry_button.clicked.connect(self.retry)
        error_layout.addWidget(self.error_label)
        error_layout.addWidget(self.retry_button, 0, QtCore.Qt.AlignCenter)
        self.error_box.hide()

        self.video_label = QtWidgets.QLabel("Starting camera...")
        self.video_label.setAlignment(QtCore.Qt.AlignCenter)
        self.video_label.setMinimumSize(640, 480)
        self.video_label.setMaximumWidth(800)
        self.video_label.setStyleSheet("background:#101214;color:#b9c0c5;")

        layout.addWidget(self.error_box)
        layout.addWidget(self.video_label, 1, QtCore.Qt.AlignHCenter)

    def start(self):
        if self._started:
            return
        self._started = True
        self.session.start()

    def retry(self):
        self.error_box.hide()
        self.error_label.setText("")
        self.video_label.show()
        self.session.retry()

    def stop(self):
        self.session.close()

    def _on_error(self, message: str):
        self.error_label.setText(message)
        self.error_box.show()
        self.video_label.hide()

    def _on_frame(self, frame, canvas):
        image_bgr = compose(frame, canvas)
        frame_rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
        h, w, ch = frame_rgb.shape
        bytes_per_line = ch * w
        image = QtGui.QImage(frame_rgb.data, w, h, bytes_per_line, QtGui.QImage.Format_RGB888)
        pixmap = QtGui.QPixmap.fromImage(image)
        self.video_label.setPixmap(pixmap.scaled(self.video_label.size(), QtCore.Qt.KeepAspectRatio))


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, config: AppConfig):
        super().__init__()
        self.setWindowTitle("Pose Detection App")
        self.resize(900, 720)

        root = QtWidgets.QWidget()
        self.setCentralWidget(root)
        layout = QtWidgets.QVBoxLayout(root)

        title = QtWidgets.QLabel("Pose Detection App")
        title.setStyleSheet("font-size:32px;font-weight:400;")
        self.pose_widget = PoseDetectionWidget(config)

        layout.addWidget(title)
        layout.addWidget(self.pose_widget, 1)

    def showEvent(self, event):
        super().showEvent(event)
        QtCore.QTimer.singleShot(0, self.pose_widget.start)

    def closeEvent(self, event):
        self.pose_widget.stop()
        super().closeEvent(event)


def main(argv=None):
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = QtWidgets.QApplication(sys.argv[:1])
    window = MainWindow(config)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
