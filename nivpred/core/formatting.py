"""Display formatting for numbers shown to clinicians.

Halves round away from zero (12.5 -> 13, -12.5 -> -13), matching how the
score itself is rounded. Python's format spec rounds halves to even.
"""

from __future__ import annotations

import re
import string
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

__all__ = ["LabelFormatter", "fixed", "format_label"]

_FIXED_SPEC = re.compile(r"^\.(\d+)f$")


def fixed(value: float, places: int = 0) -> str:
    """Render *value* with *places* decimals, rounding halves away from zero."""

    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


class LabelFormatter(string.Formatter):
    """``str.format`` whose ``.Nf`` fields go through :func:`fixed`."""

    def format_field(self, value: Any, format_spec: str) -> str:
        match = _FIXED_SPEC.match(format_spec)
        if match and isinstance(value, (int, float)) and not isinstance(value, bool):
            return fixed(value, int(match.group(1)))
        return super().format_field(value, format_spec)


_formatter = LabelFormatter()


def format_label(template: str, **values: Any) -> str:
    return _formatter.format(template, **values)
