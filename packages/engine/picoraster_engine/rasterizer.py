"""Per-pixel frame rasterizer and channel sanitizer."""

from __future__ import annotations

import inspect
import logging
import math
from typing import Any, Callable

import numpy as np

from .compiler import NamespaceSource, error_message
from .models import FrameBuffer, FrameContext, FrameError, FrameResult, Namespace, Ok

logger = logging.getLogger("picoraster.engine.rasterizer")

PIXEL_FORMAT = "RGBA8888"
MAX_COLOR_ARGS = 6

_arity_cache: dict[Any, int] = {}


def _coerce(value: Any) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return math.nan


def sanitize_channels(values: np.ndarray) -> np.ndarray:
    """Round half up and clamp to [0, 255]; NaN becomes 0."""
    values = np.nan_to_num(values.astype(np.float64), nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def sanitize(value: Any) -> int:
    return int(sanitize_channels(np.array([_coerce(value)]))[0])


def color_arity(fn: Callable[..., Any]) -> int:
    """Number of the six per-pixel arguments ``fn`` accepts positionally."""
    key = getattr(fn, "__code__", fn)
    cached = _arity_cache.get(key)
    if cached is not None:
        return cached

    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        arity = MAX_COLOR_ARGS
    else:
        arity = 0
        for p in params:
            if p.kind == inspect.Parameter.VAR_POSITIONAL:
                arity = MAX_COLOR_ARGS
                break
            if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
                arity += 1
        arity = min(arity, MAX_COLOR_ARGS)

    if len(_arity_cache) > 256:
        _arity_cache.clear()
    _arity_cache[key] = arity
    return arity


def _channels(result: Any) -> list[float]:
    try:
        raw = list(result)[:3]
    except TypeError:
        raise TypeError(f"color must return a sequence of 3 numbers, got {result!r}") from None
    raw.extend([math.nan] * (3 - len(raw)))
    return [_coerce(v) for v in raw]


def rasterize(source: NamespaceSource, namespace: Namespace, context: FrameContext) -> FrameResult:
    """Evaluate every pixel of one frame.

    ``namespace`` fixes the frame size; the sketch is re-derived from
    ``source`` for every pixel. Any exception aborts the frame and nothing
    but the ``FrameError`` is returned.
    """
    width, height = namespace.width, namespace.height
    snap = context.input
    raw = np.empty((height, width, 3), dtype=np.float64)

    try:
        with np.errstate(all="ignore"):
            for y in range(height):
                row = raw[y]
                for x in range(width):
                    color = source.derive().color
                    args = (x, y, context.frame_number, snap.mouse_x, snap.mouse_y, snap.mouse_down)
                    row[x] = _channels(color(*args[: color_arity(color)]))
    except Exception as exc:
        message = error_message(exc)
        logger.info(
            f"frame {context.frame_number} failed: {message}",
            extra={"event": "frame_error"},
        )
        return FrameError(message)

    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = sanitize_channels(raw)
    rgba[..., 3] = 255
    return Ok(FrameBuffer(width=width, height=height, pixel_format=PIXEL_FORMAT, bytes=rgba.tobytes()))
