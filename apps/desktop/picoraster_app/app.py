"""Desktop editor window: code on the left, live canvas on the right."""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QFont, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QScrollArea,
    QSplitter,
    QStackedWidget,
    QToolBar,
)

from picoraster_core import (
    AppConfig,
    PerformanceMonitor,
    configure_logging,
    get_logger,
    install_crash_hooks,
    load_config,
    uninstall_crash_hooks,
)
from picoraster_engine import DEFAULT_SKETCH, InputState, RunSession, build_capabilities

from .canvas import CanvasSurface, CanvasWidget, QtPeriodicTask
from .cli import installed_version, performance_targets


class MainWindow(QMainWindow):
    def __init__(self, config: AppConfig, text: str) -> None:
        super().__init__()
        self.config = config
        self.logger = get_logger()
        self.setWindowTitle(f"PicoRaster {installed_version()}")

        self.input_state = InputState()
        self.canvas = CanvasWidget(self.input_state, zoom=config.ui.zoom)
        self.monitor = PerformanceMonitor(performance_targets(config))
        self.session = RunSession(
            surface=CanvasSurface(self.canvas),
            task_factory=lambda: QtPeriodicTask(self),
            input_state=self.input_state,
            interval_ms=config.render.interval_ms,
            capabilities=build_capabilities(config.render.legacy_atanh),
            text=text,
        )
        self.session.on_frame = self.monitor.record
        self.session.on_running_changed(self._running_changed)
        self.session.on_error_changed(self._error_changed)

        self.editor = QPlainTextEdit()
        self.editor.setPlainText(self.session.text)
        self.editor.setFont(QFont("monospace", 11))
        self.editor.textChanged.connect(lambda: self.session.set_text(self.editor.toPlainText()))

        scroll = QScrollArea()
        scroll.setWidget(self.canvas)
        scroll.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.error_label = QLabel()
        self.error_label.setWordWrap(True)
        self.error_label.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        self.error_label.setStyleSheet("color: #ff6b6b; font-family: monospace; padding: 12px;")
        # Errors replace the canvas until the next run.
        self.view_stack = QStackedWidget()
        self.view_stack.addWidget(scroll)
        self.view_stack.addWidget(self.error_label)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.editor)
        splitter.addWidget(self.view_stack)
        splitter.setSizes([500, 700])
        self.setCentralWidget(splitter)

        toolbar = QToolBar("Run")
        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(lambda: self.session.set_running(True))
        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(lambda: self.session.set_running(False))
        toolbar.addAction(self.run_action)
        toolbar.addAction(self.stop_action)
        self.addToolBar(toolbar)

        QShortcut(QKeySequence("Ctrl+R"), self, activated=lambda: self.session.set_running(True))
        # Swallow the save reflex; there is nothing to save.
        QShortcut(QKeySequence("Ctrl+S"), self, activated=lambda: None)

        self._status_timer = QTimer(self)
        self._status_timer.timeout.connect(self._refresh_status)
        self._status_timer.start(1000)
        self._running_changed(False)

    def _running_changed(self, running: bool) -> None:
        self.run_action.setText("Restart" if running else "Run")
        self.stop_action.setEnabled(running)
        if running:
            self.monitor.reset()

    def _error_changed(self, message: str) -> None:
        self.error_label.setText(message)
        self.view_stack.setCurrentIndex(1 if message else 0)

    def _refresh_status(self) -> None:
        if not self.session.running:
            self.statusBar().showMessage("Stopped")
            return
        status = self.monitor.sample()
        self.statusBar().showMessage(
            f"frame {status.frames}  {status.fps:4.1f} fps  {status.avg_frame_s * 1000:6.1f} ms/frame  "
            f"cpu {status.cpu_percent:4.1f}%"
        )

    def shutdown(self) -> None:
        self._status_timer.stop()
        self.session.set_running(False)


def run_gui(sketch: str | None = None) -> int:
    config = load_config()
    configure_logging(keep_files=config.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    text = DEFAULT_SKETCH
    if sketch:
        text = Path(sketch).expanduser().read_text(encoding="utf-8")
        logger.info("sketch loaded", extra={"event": "sketch_loaded", "sketch": str(sketch)})

    app = QApplication(sys.argv)
    app.setApplicationName("PicoRaster")

    window = MainWindow(config, text)
    window.resize(1280, 860)
    window.show()

    exit_code = app.exec()
    window.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown", "exit_code": int(exit_code)})
    uninstall_crash_hooks()
    return int(exit_code)
