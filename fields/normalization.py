"""
Scalar normalization helpers.

Oracle output and spreadsheet cells are loosely typed: numbers may arrive as
ints, floats, numeric strings with decimal commas, or junk. Everything that
turns such a value into a number goes through here.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Union

Number = Union[int, float]

_LEADING_INT_RE = re.compile(r"(\d+)")
_THOUSANDS_RE = re.compile(r"^\d{1,3}(,\d{3})+$")


def to_number(value: Any) -> Optional[Number]:
    """
    Convert int/float (or numeric-like strings) to a number.

    Integral strings stay ints ("9" -> 9), everything else becomes a float.
    "1,000" is read as a thousands separator, "2,5" as a decimal comma.
    Returns None if not possible, and for NaN or infinity.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None

    s = str(value).strip()
    if not s:
        return None
    if _THOUSANDS_RE.match(s):
        s = s.replace(",", "")
    else:
        s = s.replace(",", ".")
    try:
        return int(s)
    except ValueError:
        pass
    try:
        result = float(s)
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def to_float(value: Any) -> Optional[float]:
    """Convert a numeric-like value to float. Return None if not possible."""
    v = to_number(value)
    return float(v) if v is not None else None


def to_int(value: Any) -> Optional[int]:
    """Convert a numeric-like value to int (truncating floats). Return None if not possible."""
    v = to_number(value)
    if v is None:
        return None
    try:
        return int(v)
    except (OverflowError, ValueError):
        return None


def to_box_number(value: Any) -> Optional[int]:
    """
    Coerce a box key to its canonical integer form.

    Accepts 2, 2.0, "2", " 2 ", "Box 2", "box2". Returns None for anything
    without digits.
    """
    n = to_number(value)
    if n is not None:
        return int(n) if float(n).is_integer() else None

    if value is None or isinstance(value, bool):
        return None
    match = _LEADING_INT_RE.search(str(value))
    return int(match.group(1)) if match else None


def to_text(value: Any) -> Optional[str]:
    """Stringify and trim a value; empty results become None."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None
