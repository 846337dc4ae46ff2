"""Human-readable rationale, actions and summaries for a computed score.

Nothing here scores: every function reads values that earlier stages have
already produced.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .formatting import fixed
from .metrics import DerivedMetrics
from .normalizer.snapshot import NormalizedSnapshot
from .scores.ladder import FactorHit

__all__ = [
    "SF_ALERT",
    "TOP_FACTORS",
    "build_brief",
    "build_summary",
    "explanation_notes",
    "oxygenation_context",
    "rank_factors",
    "recommend_actions",
]

# Mayordomo-Colunga 2013: SF below ~193 at 1 h marks high early-failure risk.
SF_ALERT = 193
TOP_FACTORS = 3

NO_SIGNAL_NOTE = "No strong high-risk signals with the data provided."

ESCALATION_TRIGGER_ACTION = (
    "Escalation triggers are flagged: set a short reassessment window and an explicit "
    "escalation plan (e.g. intubation/invasive ventilation if deterioration)."
)
HIGH_RISK_ACTIONS = (
    "Continuous monitoring and frequent reassessment (e.g. every 15-30 min), with an explicit escalation plan.",
    "Check interface/leaks, synchrony and comfort; optimise IPAP/EPAP for the goal "
    "(oxygenation vs ventilation) and tolerance.",
    "Review reversible causes and specific therapy (bronchospasm, secretions, fluids, antibiotics, etc.).",
    "Consider early mobilisation of the intubation team and logistics, especially if SF < 193 at 1-2 h "
    "or clinical deterioration.",
)
INTERMEDIATE_ACTIONS = (
    "Reassess response over the next 30-60 min; confirm RR/HR and SF trends.",
    "Optimise interface and settings; document failure criteria and escalation triggers.",
)
LOW_RISK_ACTIONS = (
    "Continue NIV with surveillance and serial reassessment; confirm sustained improvement in RR/HR and SF.",
)
SF_REMINDER_ACTION = (
    "If SF ~190 is not reached after 1 h of NIV, the need for intubation should be weighed "
    "in the overall clinical context."
)


def _whole(value: float) -> str:
    return fixed(value)


def oxygenation_context(sf_1: Optional[float], fio2_1: Optional[float]) -> Optional[str]:
    """Describe oxygenation at 1-2 h. Informational only, never scored."""

    parts = []
    if sf_1 is not None:
        if sf_1 < 150:
            parts.append("SF very low")
        elif sf_1 < SF_ALERT:
            parts.append("SF low (<193)")
        else:
            parts.append("SF acceptable")
    if fio2_1 is not None:
        if fio2_1 >= 0.7:
            parts.append("FiO₂ high (≥0.70)")
        elif fio2_1 >= 0.5:
            parts.append("FiO₂ moderate (0.50–0.69)")
        else:
            parts.append("FiO₂ low/moderate (<0.50)")
    return " • ".join(parts) if parts else None


def explanation_notes(values: NormalizedSnapshot, metrics: DerivedMetrics) -> List[str]:
    notes = []
    if values.red_flags:
        notes.append("Clinical red flags are present (these outweigh any score).")
    if values.operational_criteria:
        notes.append("Operational failure criteria are flagged (escalation triggers).")
    if metrics.sf_1 is not None and metrics.sf_1 < SF_ALERT:
        notes.append(
            f"SF at 1-2 h < 193 (SF={_whole(metrics.sf_1)}): marker of high early-failure risk "
            "in a pediatric cohort."
        )
    if metrics.rr_change is not None and metrics.rr_change > -10:
        notes.append(
            "RR reduction < 10% (or worse): a weak early response is associated with failure "
            "in prospective studies."
        )
    if values.age_months is not None and values.age_months < 6:
        notes.append("Age < 6 months: higher failure risk (synchrony/leaks, severity).")
    if values.arf_type == "type1":
        notes.append("Hypoxemic ARF (type 1): higher failure risk than type 2 in a pediatric cohort.")
    if values.diagnosis == "ards":
        notes.append("ARDS: associated with higher failure rates.")
    if values.severity_score is not None and values.severity_score >= 5:
        notes.append("Elevated severity score is associated with failure in several cohorts.")
    return notes or [NO_SIGNAL_NOTE]


def rank_factors(hits: Iterable[FactorHit]) -> List[FactorHit]:
    """Labelled hits by weight, heaviest first; ties keep evaluation order."""

    return sorted((hit for hit in hits if hit.label), key=lambda hit: -hit.weight)


def recommend_actions(
    score: int,
    values: NormalizedSnapshot,
    metrics: DerivedMetrics,
) -> List[str]:
    actions = []
    if values.operational_criteria:
        actions.append(ESCALATION_TRIGGER_ACTION)
    if score >= 65 or values.red_flags:
        actions.extend(HIGH_RISK_ACTIONS)
    elif score >= 45:
        actions.extend(INTERMEDIATE_ACTIONS)
    else:
        actions.extend(LOW_RISK_ACTIONS)
    if metrics.sf_1 is not None and metrics.sf_1 < SF_ALERT:
        actions.append(SF_REMINDER_ACTION)
    return actions


def _or_dash(value: Optional[float], suffix: str = "") -> str:
    return "—" if value is None else f"{_whole(value)}{suffix}"


def build_summary(
    values: NormalizedSnapshot,
    metrics: DerivedMetrics,
    score: int,
    tier: str,
    evaluated_at: Optional[str] = None,
) -> str:
    age = "?" if values.age_months is None else fixed(values.age_months, 1)
    arf = "Hypoxemic (type 1)" if values.arf_type == "type1" else "Hypercapnic/hypoventilation (type 2)"

    lines = ["Pediatric NIV - early failure prediction (decision support)"]
    if evaluated_at:
        lines.append(f"Evaluated: {evaluated_at}")
    lines.append(f"Age: {age} months | ARF: {arf} | Dx: {values.diagnosis}")
    if values.severity_score is not None:
        lines.append(f"Severity score: {values.severity_score:g}")
    lines.append(
        f"SF0: {_or_dash(metrics.sf_0)} | SF1-2h: {_or_dash(metrics.sf_1)} | "
        f"ΔRR: {_or_dash(metrics.rr_change, '%')} | ΔHR: {_or_dash(metrics.hr_change, '%')}"
    )
    if metrics.pco2_delta is not None:
        sign = "+" if metrics.pco2_delta > 0 else ""
        lines.append(f"ΔpCO2: {sign}{_whole(metrics.pco2_delta)} mmHg")
    lines.append(f"Score: {score}/100 | Tier: {tier}")
    if values.red_flags:
        lines.append("Red flags: YES")
    return "\n".join(lines)


def build_brief(metrics: DerivedMetrics) -> str:
    parts = []
    if metrics.sf_1 is not None:
        parts.append(f"SF1-2h={_whole(metrics.sf_1)}")
    if metrics.rr_change is not None:
        parts.append(f"ΔRR={_whole(metrics.rr_change)}%")
    if metrics.hr_change is not None:
        parts.append(f"ΔHR={_whole(metrics.hr_change)}%")
    return " | ".join(parts)
