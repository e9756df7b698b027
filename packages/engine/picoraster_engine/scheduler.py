"""Animation cadence: one-shot or periodic frame passes."""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from .compiler import NamespaceSource, error_message
from .input_state import InputState
from .models import FrameContext, FrameError, FrameResult, Namespace, RunState
from .rasterizer import rasterize
from .surface import Surface

logger = logging.getLogger("picoraster.engine.scheduler")

DEFAULT_INTERVAL_MS = 33


class ScheduleHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class _NoSchedule:
    active = False

    def cancel(self) -> None:
        return None

    def __repr__(self) -> str:
        return "NO_SCHEDULE"


NO_SCHEDULE: ScheduleHandle = _NoSchedule()


class PeriodicTask(Protocol):
    @property
    def active(self) -> bool: ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class SteppedTask:
    """Periodic task whose ticks are driven by the caller.

    ``run`` fires the callback serially on the calling thread, optionally
    sleeping for the interval between ticks.
    """

    def __init__(self, realtime: bool = False) -> None:
        self.realtime = realtime
        self.interval_ms = 0
        self.ticks = 0
        self._callback: Callable[[], None] | None = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self._callback = callback
        self._active = True

    def cancel(self) -> None:
        self._active = False

    def tick(self) -> bool:
        if not self._active or self._callback is None:
            return False
        self.ticks += 1
        self._callback()
        return True

    def run(self, ticks: int) -> int:
        fired = 0
        for i in range(ticks):
            if i and self.realtime:
                time.sleep(self.interval_ms / 1000.0)
            if not self.tick():
                break
            fired += 1
        return fired


class AnimationScheduler:
    """Owns the frame counter and the repeating task for one run."""

    def __init__(
        self,
        source: NamespaceSource,
        namespace: Namespace,
        input_state: InputState,
        surface: Surface,
        task_factory: Callable[[], PeriodicTask],
        interval_ms: int = DEFAULT_INTERVAL_MS,
        on_error: Callable[[str], None] | None = None,
        on_frame: Callable[[float], None] | None = None,
    ) -> None:
        self.source = source
        self.namespace = namespace
        self.input_state = input_state
        self.surface = surface
        self.task_factory = task_factory
        self.interval_ms = interval_ms
        self.on_error = on_error
        self.on_frame = on_frame

        self.state = RunState.IDLE
        self.frame_number = 0
        self.last_error: str | None = None
        self._task: PeriodicTask | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and self._task.active

    def start(self) -> ScheduleHandle:
        """Run once for still sketches, otherwise start the periodic task.

        Returns ``NO_SCHEDULE`` when no task was created.
        """
        self.cancel()
        self.state = RunState.RUNNING
        if not self.namespace.loop:
            self.step()
            if self.state == RunState.RUNNING:
                self.state = RunState.IDLE
            return NO_SCHEDULE

        self._task = self.task_factory()
        self._task.start(self.interval_ms, self._tick)
        logger.info(
            f"animation started at {self.interval_ms} ms",
            extra={"event": "schedule_start"},
        )
        return self

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info("animation stopped", extra={"event": "schedule_stop"})
        if self.state == RunState.RUNNING:
            self.state = RunState.IDLE

    def step(self) -> FrameResult:
        context = FrameContext(frame_number=self.frame_number, input=self.input_state.snapshot())
        started = time.perf_counter()
        result = rasterize(self.source, self.namespace, context)
        if isinstance(result, FrameError):
            self._fail(result.message)
            return result

        self.surface.paint(result.value)
        self.frame_number += 1
        if self.on_frame is not None:
            self.on_frame(time.perf_counter() - started)
        return result

    def _tick(self) -> None:
        if self.state != RunState.RUNNING:
            return
        try:
            self.step()
        except Exception as exc:
            logger.exception("frame tick failed", extra={"event": "tick_error"})
            self._fail(error_message(exc))

    def _fail(self, message: str) -> None:
        self.cancel()
        self.state = RunState.ERRORED
        self.last_error = message
        if self.on_error is not None:
            self.on_error(message)
