"""Generic evaluator turning policy ladders into a bounded score."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..formatting import format_label
from ..normalizer.units import clamp
from ..rules.engine import evaluate
from .policy import FactorRule, Policy

__all__ = ["FactorHit", "ScoreResult", "evaluate_factor", "score_variables"]


@dataclass(frozen=True)
class FactorHit:
    factor_id: str
    weight: float
    label: Optional[str] = None


@dataclass(frozen=True)
class ScoreResult:
    score: int
    raw_total: float
    hits: Tuple[FactorHit, ...]
    override_applied: bool

    @property
    def labelled(self) -> Tuple[FactorHit, ...]:
        """Hits carrying a label, in evaluation order."""

        return tuple(hit for hit in self.hits if hit.label)


def evaluate_factor(factor: FactorRule, variables: Mapping[str, Any]) -> Optional[FactorHit]:
    """Return the contribution of *factor*, or ``None`` when it adds nothing.

    A factor whose required values are unknown falls back to its silent
    ``unknown_weight``. Otherwise the first matching rung wins.
    """

    if any(variables.get(name) is None for name in factor.requires):
        if factor.unknown_weight is None:
            return None
        return FactorHit(factor.id, factor.unknown_weight)

    for rung in factor.ladder:
        if rung.when is None or evaluate(rung.when, variables):
            label = format_label(rung.label, **variables) if rung.label else None
            return FactorHit(factor.id, rung.weight, label)
    return None


def score_variables(policy: Policy, variables: Mapping[str, Any]) -> ScoreResult:
    total = 0.0
    hits = []
    for factor in policy.factors:
        hit = evaluate_factor(factor, variables)
        if hit is None:
            continue
        total += hit.weight
        hits.append(hit)

    override_applied = False
    override = policy.override
    if override is not None and evaluate(override.when, variables):
        # Floor, not a reset: a higher accumulated score is kept.
        total = max(total, override.floor)
        hits.append(FactorHit("override", override.weight, override.label))
        override_applied = True

    score = int(clamp(math.floor(total + 0.5), policy.lower, policy.upper))
    return ScoreResult(score=score, raw_total=total, hits=tuple(hits), override_applied=override_applied)
