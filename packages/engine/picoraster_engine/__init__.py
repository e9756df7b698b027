"""Sketch execution engine: compile, rasterize, schedule, contain failures."""

from .capabilities import CAPABILITY_NAMES, DEFAULT_CAPABILITIES, build_capabilities
from .compiler import DEFAULT_HEIGHT, DEFAULT_LOOP, DEFAULT_WIDTH, NamespaceSource, compile_source
from .input_state import InputState
from .models import (
    CompileError,
    FrameBuffer,
    FrameContext,
    FrameError,
    InputSnapshot,
    Namespace,
    Ok,
    RunState,
)
from .rasterizer import rasterize, sanitize
from .runner import describe_error, run
from .scheduler import NO_SCHEDULE, AnimationScheduler, PeriodicTask, ScheduleHandle, SteppedTask
from .session import DEFAULT_SKETCH, RunSession
from .surface import SURFACE_ID, ImageSurface, Surface, frame_to_image

__all__ = [
    "AnimationScheduler",
    "CAPABILITY_NAMES",
    "CompileError",
    "DEFAULT_CAPABILITIES",
    "DEFAULT_HEIGHT",
    "DEFAULT_LOOP",
    "DEFAULT_SKETCH",
    "DEFAULT_WIDTH",
    "FrameBuffer",
    "FrameContext",
    "FrameError",
    "ImageSurface",
    "InputSnapshot",
    "InputState",
    "NO_SCHEDULE",
    "Namespace",
    "NamespaceSource",
    "Ok",
    "PeriodicTask",
    "RunSession",
    "RunState",
    "SURFACE_ID",
    "ScheduleHandle",
    "SteppedTask",
    "Surface",
    "build_capabilities",
    "compile_source",
    "describe_error",
    "frame_to_image",
    "rasterize",
    "run",
    "sanitize",
]
