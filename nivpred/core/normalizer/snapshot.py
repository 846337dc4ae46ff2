"""Turn a raw clinical snapshot into typed values for the scoring stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...schemas.snapshot import ClinicalSnapshot
from .units import age_to_months, parse_number, parse_oxygen_fraction

__all__ = ["NormalizedSnapshot", "normalize_snapshot"]


@dataclass(frozen=True)
class NormalizedSnapshot:
    age_months: Optional[float]
    arf_type: str
    diagnosis: str
    severity_score: Optional[float]
    red_flags: bool
    operational_criteria: bool

    spo2_0: Optional[float]
    fio2_0: Optional[float]
    epap_0: Optional[float]
    rr_0: Optional[float]
    hr_0: Optional[float]
    ph_0: Optional[float]
    pco2_0: Optional[float]

    spo2_1: Optional[float]
    fio2_1: Optional[float]
    epap_1: Optional[float]
    ipap_1: Optional[float]
    rr_1: Optional[float]
    hr_1: Optional[float]
    ph_1: Optional[float]
    pco2_1: Optional[float]


def normalize_snapshot(snapshot: ClinicalSnapshot) -> NormalizedSnapshot:
    start = snapshot.initiation
    early = snapshot.early
    return NormalizedSnapshot(
        age_months=age_to_months(snapshot.age_value, snapshot.age_unit),
        arf_type=snapshot.arf_type,
        diagnosis=snapshot.diagnosis,
        severity_score=parse_number(snapshot.severity_score),
        red_flags=snapshot.red_flags.any(),
        operational_criteria=snapshot.operational_criteria.any(),
        spo2_0=parse_number(start.spo2),
        fio2_0=parse_oxygen_fraction(start.fio2),
        epap_0=parse_number(start.epap),
        rr_0=parse_number(start.rr),
        hr_0=parse_number(start.hr),
        ph_0=parse_number(start.ph),
        pco2_0=parse_number(start.pco2),
        spo2_1=parse_number(early.spo2),
        fio2_1=parse_oxygen_fraction(early.fio2),
        epap_1=parse_number(early.epap),
        ipap_1=parse_number(early.ipap),
        rr_1=parse_number(early.rr),
        hr_1=parse_number(early.hr),
        ph_1=parse_number(early.ph),
        pco2_1=parse_number(early.pco2),
    )
