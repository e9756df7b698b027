"""Numeric capability set and restricted builtins exposed to sketch code."""

from __future__ import annotations

import builtins
import logging
import math
from types import MappingProxyType
from typing import Any, Callable, Mapping

import numpy as np

logger = logging.getLogger("picoraster.engine.capabilities")

CAPABILITY_NAMES = (
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "atan2",
    "sinh",
    "cosh",
    "tanh",
    "asinh",
    "acosh",
    "atanh",
    "log",
    "pow",
    "floor",
    "ceil",
)

# Python language builtins, not host numeric-library functions.
_SAFE_BUILTINS = (
    "abs",
    "all",
    "any",
    "bool",
    "dict",
    "divmod",
    "enumerate",
    "filter",
    "float",
    "int",
    "isinstance",
    "len",
    "list",
    "map",
    "max",
    "min",
    "range",
    "reversed",
    "round",
    "set",
    "sorted",
    "sum",
    "tuple",
    "zip",
    "ArithmeticError",
    "Exception",
    "IndexError",
    "KeyError",
    "OverflowError",
    "TypeError",
    "ValueError",
    "ZeroDivisionError",
)


def _unary(ufunc: np.ufunc, name: str) -> Callable[[Any], float]:
    def fn(x):
        return float(ufunc(x))

    fn.__name__ = name
    fn.__qualname__ = name
    return fn


def _binary(ufunc: np.ufunc, name: str) -> Callable[[Any, Any], float]:
    def fn(a, b):
        return float(ufunc(a, b))

    fn.__name__ = name
    fn.__qualname__ = name
    return fn


def _rounding(ufunc: np.ufunc, name: str) -> Callable[[Any], Any]:
    def fn(x):
        v = float(ufunc(x))
        return int(v) if math.isfinite(v) else v

    fn.__name__ = name
    fn.__qualname__ = name
    return fn


def build_capabilities(legacy_atanh: bool = False) -> Mapping[str, Callable[..., Any]]:
    """Return the immutable name -> function mapping visible to sketches.

    Transcendentals and ``pow`` go through numpy so that domain errors give
    NaN or inf rather than raising. ``floor`` and ``ceil`` return ints for finite
    input so their results can index sequences; NaN and inf pass through.
    """
    table: dict[str, Callable[..., Any]] = {
        "sin": _unary(np.sin, "sin"),
        "cos": _unary(np.cos, "cos"),
        "tan": _unary(np.tan, "tan"),
        "asin": _unary(np.arcsin, "asin"),
        "acos": _unary(np.arccos, "acos"),
        "atan": _unary(np.arctan, "atan"),
        "atan2": _binary(np.arctan2, "atan2"),
        "sinh": _unary(np.sinh, "sinh"),
        "cosh": _unary(np.cosh, "cosh"),
        "tanh": _unary(np.tanh, "tanh"),
        "asinh": _unary(np.arcsinh, "asinh"),
        "acosh": _unary(np.arccosh, "acosh"),
        "atanh": _unary(np.arctanh, "atanh"),
        "log": _unary(np.log, "log"),
        "pow": _binary(np.float_power, "pow"),
        "floor": _rounding(np.floor, "floor"),
        "ceil": _rounding(np.ceil, "ceil"),
    }
    if legacy_atanh:
        # Older sketches were written against atanh bound to tanh.
        logger.warning("atanh is aliased to tanh", extra={"event": "legacy_atanh"})
        table["atanh"] = table["tanh"]
    return MappingProxyType(table)


def restricted_builtins() -> Mapping[str, Any]:
    return MappingProxyType({name: getattr(builtins, name) for name in _SAFE_BUILTINS})


DEFAULT_CAPABILITIES = build_capabilities()
