"""Sketch source compiler.

User text is parsed once into a code object. Every evaluation then runs that
code in a brand new globals mapping seeded with the capability set, the
restricted builtins and the default settings, and reads ``width``,
``height``, ``loop`` and ``color`` back out of it. The rasterizer evaluates
once per pixel, so nothing assigned at the top level of a sketch survives
from one pixel to the next.
"""

from __future__ import annotations

import logging
from types import CodeType
from typing import Any, Mapping

import numpy as np

from .capabilities import DEFAULT_CAPABILITIES, restricted_builtins
from .models import CompileError, CompileResult, Namespace, Ok

logger = logging.getLogger("picoraster.engine.compiler")

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 800
DEFAULT_LOOP = True

SKETCH_FILENAME = "<sketch>"


class SketchError(Exception):
    """A sketch evaluated but produced an unusable namespace."""


def error_message(exc: BaseException) -> str:
    """Readable message for a failure raised by sketch code."""
    if isinstance(exc, SyntaxError):
        where = f" (line {exc.lineno})" if exc.lineno else ""
        return f"{exc.msg}{where}"
    if isinstance(exc, KeyError) and exc.args:
        return f"KeyError: {exc.args[0]!r}"
    text = str(exc)
    return text if text else type(exc).__name__


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise SketchError(f"{name} must be a positive integer, got {value!r}")
    if value != value or int(value) != value or value <= 0:
        raise SketchError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class NamespaceSource:
    """Compiled sketch that can re-derive a fresh namespace on demand."""

    def __init__(self, code: CodeType, capabilities: Mapping[str, Any]) -> None:
        self.code = code
        self.capabilities = capabilities
        self._builtins = restricted_builtins()

    def _globals(self) -> dict[str, Any]:
        scope: dict[str, Any] = dict(self.capabilities)
        scope["__builtins__"] = dict(self._builtins)
        scope["__name__"] = "sketch"
        scope["width"] = DEFAULT_WIDTH
        scope["height"] = DEFAULT_HEIGHT
        scope["loop"] = DEFAULT_LOOP
        return scope

    def derive(self) -> Namespace:
        scope = self._globals()
        exec(self.code, scope)
        if "color" not in scope:
            raise SketchError("color is not defined")
        color = scope["color"]
        if not callable(color):
            raise SketchError("color must be a function")
        return Namespace(
            width=_positive_int("width", scope["width"]),
            height=_positive_int("height", scope["height"]),
            loop=bool(scope["loop"]),
            color=color,
        )


def compile_source(text: str, capabilities: Mapping[str, Any] | None = None) -> CompileResult:
    """Compile sketch text and evaluate it once.

    Returns ``Ok((source, namespace))`` on success, or ``CompileError`` with
    the underlying message when parsing or the first evaluation fails.
    """
    caps = DEFAULT_CAPABILITIES if capabilities is None else capabilities
    try:
        code = compile(text, SKETCH_FILENAME, "exec")
        source = NamespaceSource(code, caps)
        with np.errstate(all="ignore"):
            namespace = source.derive()
    except Exception as exc:
        message = error_message(exc)
        logger.info(f"compile failed: {message}", extra={"event": "compile_error"})
        return CompileError(message)
    logger.info(
        f"compiled sketch {namespace.width}x{namespace.height} loop={namespace.loop}",
        extra={"event": "compile_ok"},
    )
    return Ok((source, namespace))
