"""Render handler arguments into a single log message."""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable

from .serialization import to_json

ObjectPrinter = Callable[[Any], str]

_SCALARS = (bool, int, float, type(None))


def default_object_printer(obj: Any) -> str:
    return to_json(obj)


def render_scalar(value: bool | int | float | None) -> str:
    """Text for a scalar argument, as a JavaScript host would join it.

    ``None`` becomes an empty string, booleans are lowercase and integral
    floats drop the trailing ``.0``.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def render_arg(arg: Any, printer: ObjectPrinter) -> str:
    """Render one positional argument.

    Strings are trimmed, numbers/bools/None go through ``render_scalar`` and
    everything else (mappings, sequences, objects) goes through ``printer``.
    A failing printer falls back to ``repr`` so rendering never raises.
    """
    if isinstance(arg, str):
        return arg.strip()
    if isinstance(arg, _SCALARS):
        return render_scalar(arg)
    try:
        return str(printer(arg))
    except Exception:
        return repr(arg)


def render_message(args: Iterable[Any], printer: ObjectPrinter) -> str:
    return " ".join(render_arg(arg, printer) for arg in args)
