"""Qt drawing surface and timer-backed periodic task."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QPoint, QSize, Qt, QTimer
from PySide6.QtGui import QImage, QMouseEvent, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from picoraster_engine import SURFACE_ID, FrameBuffer, InputState


class QtPeriodicTask:
    """QTimer on the GUI thread; timeouts never overlap a running callback."""

    def __init__(self, parent=None) -> None:
        self._timer: QTimer | None = QTimer(parent)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._connected = False

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        if self._timer is None:
            raise RuntimeError("task was cancelled")
        self._timer.timeout.connect(callback)
        self._connected = True
        self._timer.start(interval_ms)

    def cancel(self) -> None:
        # A fresh task is made per run, so release the timer and its callback.
        timer, self._timer = self._timer, None
        if timer is None:
            return
        timer.stop()
        if self._connected:
            timer.timeout.disconnect()
            self._connected = False
        timer.deleteLater()


class CanvasWidget(QWidget):
    """Shows the last painted frame, scaled by an integer zoom without smoothing."""

    def __init__(self, input_state: InputState, zoom: int = 1, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName(SURFACE_ID)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.input_state = input_state
        self.zoom = max(1, zoom)
        self._image = QImage()
        self._frame_width = 0
        self._frame_height = 0

    def sizeHint(self) -> QSize:
        return QSize(self._frame_width * self.zoom, self._frame_height * self.zoom)

    def resize_frame(self, width: int, height: int) -> None:
        self._frame_width = width
        self._frame_height = height
        self._image = QImage(width, height, QImage.Format.Format_RGBA8888)
        self._image.fill(Qt.GlobalColor.black)
        self.setFixedSize(self.sizeHint())
        self.update()

    # Surface protocol; ``resize`` is taken by QWidget.
    def paint(self, frame: FrameBuffer) -> None:
        stride = frame.width * 4
        # QImage does not own the buffer, so copy before ``frame`` goes away.
        self._image = QImage(frame.bytes, frame.width, frame.height, stride, QImage.Format.Format_RGBA8888).copy()
        self.update()

    def paintEvent(self, _event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, False)
        if not self._image.isNull():
            scaled = self._image.scaled(
                self._image.width() * self.zoom,
                self._image.height() * self.zoom,
                Qt.AspectRatioMode.IgnoreAspectRatio,
                Qt.TransformationMode.FastTransformation,
            )
            painter.drawImage(0, 0, scaled)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        self.input_state.press()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self.input_state.release()
        super().mouseReleaseEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.globalPosition()
        origin = self.mapToGlobal(QPoint(0, 0))
        self.input_state.move(pos.x() / self.zoom, pos.y() / self.zoom, origin.x() / self.zoom, origin.y() / self.zoom)
        super().mouseMoveEvent(event)


class CanvasSurface:
    """Adapts ``CanvasWidget`` to the engine's ``resize``/``paint`` surface."""

    def __init__(self, widget: CanvasWidget) -> None:
        self.widget = widget

    def resize(self, width: int, height: int) -> None:
        self.widget.resize_frame(width, height)

    def paint(self, frame: FrameBuffer) -> None:
        self.widget.paint(frame)
