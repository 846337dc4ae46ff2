"""Schemas defining the risk assessment output contract."""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import Field

from .common import StrictModel

Tier = Literal["Low", "Intermediate", "High", "Very High"]


class Factor(StrictModel):
    weight: float
    label: str


class RiskAssessment(StrictModel):
    sf_initiation: Optional[float] = None
    sf_early: Optional[float] = None
    rr_change_pct: Optional[float] = None
    hr_change_pct: Optional[float] = None
    pco2_delta: Optional[float] = None
    age_months: Optional[float] = None
    oxygenation_context: Optional[str] = None

    score: int = Field(ge=0, le=100)
    tier: Tier
    badge: str
    red_flags: bool = False
    operational_criteria: bool = False

    factors: Tuple[Factor, ...] = ()
    top_factors: Tuple[str, ...] = ()
    notes: Tuple[str, ...] = ()
    explanation: str = ""
    actions: Tuple[str, ...] = ()
    summary: str = ""
    brief: str = ""
