"""Typed engine models and tagged results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


class RunState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    ERRORED = "Errored"


@dataclass(frozen=True)
class Namespace:
    width: int
    height: int
    loop: bool
    color: Callable[..., Any]


@dataclass(frozen=True)
class InputSnapshot:
    mouse_x: int = 0
    mouse_y: int = 0
    mouse_down: bool = False


@dataclass(frozen=True)
class FrameContext:
    frame_number: int
    input: InputSnapshot


@dataclass(frozen=True)
class FrameBuffer:
    width: int
    height: int
    pixel_format: str
    bytes: bytes


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class CompileError:
    message: str


@dataclass(frozen=True)
class FrameError:
    message: str


CompileResult = Union[Ok[Any], CompileError]
FrameResult = Union[Ok[FrameBuffer], FrameError]
