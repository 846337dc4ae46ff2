"""Derived ratio and trend quantities computed from a normalised snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .normalizer.snapshot import NormalizedSnapshot

__all__ = ["DerivedMetrics", "co2_delta", "compute_metrics", "oxygenation_ratio", "percent_change"]


@dataclass(frozen=True)
class DerivedMetrics:
    sf_0: Optional[float]
    sf_1: Optional[float]
    rr_change: Optional[float]
    hr_change: Optional[float]
    pco2_delta: Optional[float]


def oxygenation_ratio(spo2: Optional[float], fio2: Optional[float]) -> Optional[float]:
    """SpO2/FiO2 ratio; *fio2* must already be a fraction."""

    if spo2 is None or fio2 is None or fio2 <= 0:
        return None
    return spo2 / fio2


def percent_change(new: Optional[float], old: Optional[float]) -> Optional[float]:
    """Relative change from *old* to *new* in percent. Negative means a decrease."""

    if new is None or old is None or old == 0:
        return None
    return (new - old) / old * 100


def co2_delta(pco2_0: Optional[float], pco2_1: Optional[float]) -> Optional[float]:
    # Positive means CO2 is rising.
    if pco2_0 is None or pco2_1 is None:
        return None
    return pco2_1 - pco2_0


def compute_metrics(values: NormalizedSnapshot) -> DerivedMetrics:
    return DerivedMetrics(
        sf_0=oxygenation_ratio(values.spo2_0, values.fio2_0),
        sf_1=oxygenation_ratio(values.spo2_1, values.fio2_1),
        rr_change=percent_change(values.rr_1, values.rr_0),
        hr_change=percent_change(values.hr_1, values.hr_0),
        pco2_delta=co2_delta(values.pco2_0, values.pco2_1),
    )
