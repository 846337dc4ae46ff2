"""Weighted-rule scoring driven by YAML policy packs."""

from .ladder import FactorHit, ScoreResult, evaluate_factor, score_variables
from .policy import DEFAULT_POLICY, Policy, PolicyError, load_policy
from .variables import SCORING_VARIABLES, build_variables

__all__ = [
    "DEFAULT_POLICY",
    "FactorHit",
    "Policy",
    "PolicyError",
    "SCORING_VARIABLES",
    "ScoreResult",
    "build_variables",
    "evaluate_factor",
    "load_policy",
    "score_variables",
]
