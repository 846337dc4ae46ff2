"""Map a final score onto an ordinal risk tier."""

from __future__ import annotations

from typing import Tuple

from .scores.policy import Policy

__all__ = ["classify"]


def classify(score: float, policy: Policy) -> Tuple[str, str]:
    """Return ``(tier, badge)``; bands are tried from the highest floor down."""

    for band in policy.tiers:
        if score >= band.min_score:
            return band.tier, band.badge
    lowest = policy.tiers[-1]
    return lowest.tier, lowest.badge
