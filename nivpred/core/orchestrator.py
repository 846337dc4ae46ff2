"""High-level orchestrator: snapshot in, risk assessment out.

Normalizer -> derived metrics -> scorer -> classifier -> narrator. Each stage
returns a new frozen value; nothing here reads a clock or keeps state between
calls.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ..schemas.assessment import Factor, RiskAssessment
from ..schemas.snapshot import ClinicalSnapshot
from .classifier import classify
from .metrics import compute_metrics
from .narrator import (
    TOP_FACTORS,
    build_brief,
    build_summary,
    explanation_notes,
    oxygenation_context,
    rank_factors,
    recommend_actions,
)
from .normalizer.snapshot import normalize_snapshot
from .scores import DEFAULT_POLICY, build_variables, load_policy, score_variables

__all__ = ["assess"]

logger = logging.getLogger(__name__)


def assess(
    snapshot: Union[ClinicalSnapshot, Mapping[str, Any]],
    *,
    evaluated_at: Optional[str] = None,
    policy_id: str = DEFAULT_POLICY,
) -> RiskAssessment:
    """Compute the NIV failure risk assessment for one snapshot.

    ``evaluated_at`` is only echoed into the summary text so that repeated
    calls on the same snapshot stay identical.
    """

    if not isinstance(snapshot, ClinicalSnapshot):
        snapshot = ClinicalSnapshot.model_validate(snapshot)

    policy = load_policy(policy_id)
    values = normalize_snapshot(snapshot)
    metrics = compute_metrics(values)
    result = score_variables(policy, build_variables(values, metrics))
    tier, badge = classify(result.score, policy)
    ranked = rank_factors(result.hits)
    notes = explanation_notes(values, metrics)

    logger.debug(
        "policy=%s score=%d tier=%s override=%s",
        policy.id,
        result.score,
        tier,
        result.override_applied,
    )

    return RiskAssessment(
        sf_initiation=metrics.sf_0,
        sf_early=metrics.sf_1,
        rr_change_pct=metrics.rr_change,
        hr_change_pct=metrics.hr_change,
        pco2_delta=metrics.pco2_delta,
        age_months=values.age_months,
        oxygenation_context=oxygenation_context(metrics.sf_1, values.fio2_1),
        score=result.score,
        tier=tier,
        badge=badge,
        red_flags=values.red_flags,
        operational_criteria=values.operational_criteria,
        factors=tuple(Factor(weight=hit.weight, label=hit.label) for hit in ranked),
        top_factors=tuple(hit.label for hit in ranked[:TOP_FACTORS]),
        notes=tuple(notes),
        explanation=" ".join(notes),
        actions=tuple(recommend_actions(result.score, values, metrics)),
        summary=build_summary(values, metrics, result.score, tier, evaluated_at),
        brief=build_brief(metrics),
    )
