"""DestringService: converts string-encoded amounts to numbers.

Parsing is permissive in the way paysheet exports need: the leading numeric
part of a cell is used ("50000.00 Rs" -> 50000.0) and anything without one
becomes 0. Missing and invalid cells are indistinguishable on purpose.
"""

from __future__ import annotations

import math
import re
from typing import Any

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_QUOTES = "\"'"


def coerce_currency(value: Any) -> float:
    """Return the number at the start of ``value``, or 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    text = str(value).strip().strip(_QUOTES).strip()
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0
