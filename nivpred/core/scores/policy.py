"""Typed view over a scoring policy pack, validated once at load time."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

from ...content import load_pack
from ..rules.engine import RuleEvaluationError, check_expression
from .variables import SCORING_VARIABLES

__all__ = [
    "FactorRule",
    "Override",
    "Policy",
    "PolicyError",
    "Rung",
    "TierBand",
    "load_policy",
    "parse_policy",
]

DEFAULT_POLICY = "niv_failure"


class PolicyError(ValueError):
    """Raised when a policy pack is malformed."""


@dataclass(frozen=True)
class Rung:
    weight: float
    when: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class FactorRule:
    id: str
    ladder: Tuple[Rung, ...]
    requires: Tuple[str, ...] = ()
    unknown_weight: Optional[float] = None


@dataclass(frozen=True)
class Override:
    when: str
    floor: float
    weight: float
    label: str


@dataclass(frozen=True)
class TierBand:
    min_score: float
    tier: str
    badge: str


@dataclass(frozen=True)
class Policy:
    id: str
    version: str
    lower: float
    upper: float
    factors: Tuple[FactorRule, ...]
    override: Optional[Override]
    tiers: Tuple[TierBand, ...]


def _check(expression: Any, where: str) -> str:
    if not isinstance(expression, str) or not expression.strip():
        raise PolicyError(f"{where}: condition must be a non-empty string")
    try:
        check_expression(expression, SCORING_VARIABLES)
    except RuleEvaluationError as exc:
        raise PolicyError(f"{where}: {exc}") from exc
    return expression


_FIELD_ROOT = re.compile(r"[.\[]")


def _check_label(label: Any, requires: Tuple[str, ...], where: str) -> Optional[str]:
    """Placeholders may only name required variables, which are never unknown."""

    if label is None:
        return None
    try:
        fields = [field for _, field, _, _ in string.Formatter().parse(str(label)) if field is not None]
    except ValueError as exc:
        raise PolicyError(f"{where}: malformed label {label!r}: {exc}") from exc
    for field in fields:
        name = _FIELD_ROOT.split(field, 1)[0]
        if name not in requires:
            raise PolicyError(f"{where}: label placeholder {{{field}}} must name a required variable")
    return str(label)


def _parse_factor(raw: Dict[str, Any]) -> FactorRule:
    factor_id = raw.get("id")
    if not factor_id:
        raise PolicyError("factor without id")
    requires = tuple(raw.get("requires") or ())
    unknown = [name for name in requires if name not in SCORING_VARIABLES]
    if unknown:
        raise PolicyError(f"{factor_id}: unknown required variables {unknown}")
    rungs = []
    for index, rung in enumerate(raw.get("ladder") or ()):
        when = rung.get("when")
        if when is not None:
            _check(when, f"{factor_id}[{index}]")
        label = _check_label(rung.get("label"), requires, f"{factor_id}[{index}]")
        rungs.append(Rung(weight=float(rung["weight"]), when=when, label=label))
    if not rungs:
        raise PolicyError(f"{factor_id}: empty ladder")
    unknown_weight = raw.get("unknown_weight")
    return FactorRule(
        id=factor_id,
        ladder=tuple(rungs),
        requires=requires,
        unknown_weight=None if unknown_weight is None else float(unknown_weight),
    )


def parse_policy(pack: Dict[str, Any]) -> Policy:
    meta = pack.get("meta", {})
    lower, upper = pack.get("score_bounds", (0, 100))
    factors = tuple(_parse_factor(raw) for raw in pack.get("factors") or ())

    override = None
    raw_override = pack.get("override")
    if raw_override:
        override = Override(
            when=_check(raw_override.get("when"), "override"),
            floor=float(raw_override["floor"]),
            weight=float(raw_override["weight"]),
            label=_check_label(raw_override["label"], (), "override"),
        )

    tiers = tuple(
        TierBand(min_score=float(band["min_score"]), tier=band["tier"], badge=band["badge"])
        for band in pack.get("tiers") or ()
    )
    if not tiers:
        raise PolicyError("policy defines no tiers")
    if [band.min_score for band in tiers] != sorted((band.min_score for band in tiers), reverse=True):
        raise PolicyError("tiers must be listed from highest to lowest min_score")
    if tiers[-1].min_score > lower:
        raise PolicyError("lowest tier must cover the bottom of the score range")

    return Policy(
        id=meta.get("id", DEFAULT_POLICY),
        version=str(meta.get("version", "0")),
        lower=float(lower),
        upper=float(upper),
        factors=factors,
        override=override,
        tiers=tiers,
    )


@lru_cache(maxsize=8)
def load_policy(pack_id: str = DEFAULT_POLICY) -> Policy:
    try:
        return parse_policy(load_pack(pack_id))
    except (KeyError, TypeError) as exc:
        raise PolicyError(f"policy pack {pack_id!r} is malformed: {exc}") from exc
