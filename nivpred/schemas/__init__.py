"""Pydantic contracts for clinical snapshots and risk assessments."""

from .assessment import Factor, RiskAssessment
from .snapshot import (
    ClinicalSnapshot,
    EarlyVitals,
    InitiationVitals,
    OperationalCriteria,
    RedFlags,
)

__all__ = [
    "ClinicalSnapshot",
    "EarlyVitals",
    "Factor",
    "InitiationVitals",
    "OperationalCriteria",
    "RedFlags",
    "RiskAssessment",
]
