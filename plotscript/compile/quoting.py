from __future__ import annotations

import math

from plotscript.errors import InvalidValue
from plotscript.values import require_text


def quote(text: str, field_name: str = "text") -> str:
    """Single-quote ``text`` for a gnuplot script; embedded quotes are doubled."""
    require_text(text, field_name)
    return "'" + text.replace("'", "''") + "'"


def format_number(value: float) -> str:
    out = float(value)
    if not math.isfinite(out):
        raise InvalidValue(f"cannot emit non-finite number: {value!r}")
    if out == 0.0:
        # Both zeros print as 0.0.
        out = 0.0
    return repr(out)
