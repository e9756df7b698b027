"""Run/stop/restart bookkeeping for an editor hosting a sketch."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .input_state import InputState
from .runner import run
from .scheduler import DEFAULT_INTERVAL_MS, PeriodicTask, ScheduleHandle
from .surface import Surface

logger = logging.getLogger("picoraster.engine.session")

DEFAULT_SKETCH = """def color(x, y):
    return [x / width * 255, y / height * 255, 255]
"""


class RunSession:
    """Holds the sketch text, run flag, error message and live handles."""

    def __init__(
        self,
        surface: Surface,
        task_factory: Callable[[], PeriodicTask],
        input_state: InputState | None = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        capabilities: Mapping[str, Any] | None = None,
        text: str | None = None,
    ) -> None:
        self.surface = surface
        self.task_factory = task_factory
        self.input_state = input_state or InputState()
        self.interval_ms = interval_ms
        self.capabilities = capabilities
        self.text = text or DEFAULT_SKETCH
        self.on_frame: Callable[[float], None] | None = None

        self._running = False
        self._error = ""
        self._handles: list[ScheduleHandle] = []
        self._running_listeners: list[Callable[[bool], None]] = []
        self._error_listeners: list[Callable[[str], None]] = []

    @property
    def running(self) -> bool:
        return self._running

    @property
    def error(self) -> str:
        return self._error

    @property
    def handles(self) -> list[ScheduleHandle]:
        return list(self._handles)

    def on_running_changed(self, callback: Callable[[bool], None]) -> None:
        self._running_listeners.append(callback)

    def on_error_changed(self, callback: Callable[[str], None]) -> None:
        self._error_listeners.append(callback)

    def set_text(self, text: str) -> None:
        self.text = text

    def set_running(self, value: bool) -> None:
        if not value and not self._running:
            return
        if not value:
            self._clear_handles()
            self._set_running(False)
            return

        if self._running:
            logger.info("restarting sketch", extra={"event": "restart"})
        self._set_running(True)
        self._set_error("")
        self._clear_handles()
        run(
            self.text,
            self._set_running,
            self._set_error,
            self._handles.append,
            surface=self.surface,
            input_state=self.input_state,
            task_factory=self.task_factory,
            interval_ms=self.interval_ms,
            capabilities=self.capabilities,
            on_frame=self.on_frame,
        )

    def start(self) -> None:
        self.set_running(True)

    def stop(self) -> None:
        self.set_running(False)

    def _clear_handles(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles = []

    def _set_running(self, value: bool) -> None:
        if value == self._running:
            return
        self._running = value
        for callback in self._running_listeners:
            callback(value)

    def _set_error(self, message: str) -> None:
        if message == self._error:
            return
        self._error = message
        if message:
            logger.warning(f"sketch error: {message}", extra={"event": "sketch_error"})
        for callback in self._error_listeners:
            callback(message)
