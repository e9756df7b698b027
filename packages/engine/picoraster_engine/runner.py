"""Caller-facing run entry point with error containment.

``run`` compiles the sketch, sizes the surface and hands over to an
``AnimationScheduler``. Every failure, whether from compiling, from a frame
pass or from the host side, ends up as a message on ``set_error`` with
``set_running(False)`` and any schedule cancelled. A schedule handle is
always registered through ``add_handle`` so callers can cancel uniformly.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .compiler import compile_source, error_message
from .input_state import InputState
from .models import CompileError, RunState
from .scheduler import DEFAULT_INTERVAL_MS, NO_SCHEDULE, AnimationScheduler, PeriodicTask, ScheduleHandle
from .surface import Surface

logger = logging.getLogger("picoraster.engine.runner")


def describe_error(value: object) -> str:
    if isinstance(value, BaseException):
        return error_message(value)
    return str(value)


def run(
    source_text: str,
    set_running: Callable[[bool], None],
    set_error: Callable[[str], None],
    add_handle: Callable[[ScheduleHandle], None],
    *,
    surface: Surface,
    input_state: InputState,
    task_factory: Callable[[], PeriodicTask],
    interval_ms: int = DEFAULT_INTERVAL_MS,
    capabilities: Mapping[str, Any] | None = None,
    on_frame: Callable[[float], None] | None = None,
) -> None:
    handle: ScheduleHandle = NO_SCHEDULE

    def frame_failed(message: str) -> None:
        set_running(False)
        set_error(message)

    try:
        compiled = compile_source(source_text, capabilities)
        if isinstance(compiled, CompileError):
            set_running(False)
            set_error(compiled.message)
            return

        source, namespace = compiled.value
        surface.resize(namespace.width, namespace.height)
        scheduler = AnimationScheduler(
            source,
            namespace,
            input_state,
            surface,
            task_factory,
            interval_ms=interval_ms,
            on_error=frame_failed,
            on_frame=on_frame,
        )
        handle = scheduler.start()
        if not namespace.loop and scheduler.state != RunState.ERRORED:
            set_running(False)
    except Exception as exc:
        logger.exception("run failed", extra={"event": "run_error"})
        handle.cancel()
        handle = NO_SCHEDULE
        set_running(False)
        set_error(describe_error(exc))
    finally:
        add_handle(handle)
