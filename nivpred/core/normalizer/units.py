"""Normalisation helpers for vital signs and numeric inputs."""

from __future__ import annotations

import math
from typing import Any, Optional

__all__ = ["age_to_months", "clamp", "parse_number", "parse_oxygen_fraction"]

DAYS_PER_MONTH = 30.4375


def parse_number(value: Any) -> Optional[float]:
    """Return *value* as a finite float, accepting a comma decimal separator.

    Missing, blank or non-numeric input yields ``None``; this never raises.
    """

    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().replace(",", ".", 1)
    # float() also takes digit separators and non-ASCII digits; bedside text does not.
    if not text or "_" in text or not text.isascii():
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_oxygen_fraction(value: Any) -> Optional[float]:
    """Parse FiO2 given either as a percentage (40) or a fraction (0.40)."""

    number = parse_number(value)
    if number is None:
        return None
    if 1.0 < number <= 100:
        return number / 100
    return number


def age_to_months(value: Any, unit: str) -> Optional[float]:
    number = parse_number(value)
    if number is None:
        return None
    if unit == "days":
        return number / DAYS_PER_MONTH
    if unit == "years":
        return number * 12
    return number


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
