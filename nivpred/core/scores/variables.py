"""Variables a policy condition may reference."""

from __future__ import annotations

from typing import Any, Dict

from ..metrics import DerivedMetrics
from ..normalizer.snapshot import NormalizedSnapshot

SCORING_VARIABLES = frozenset(
    {
        "sf_0",
        "sf_1",
        "rr_change",
        "hr_change",
        "pco2_delta",
        "age_months",
        "arf_type",
        "diagnosis",
        "fio2_0",
        "fio2_1",
        "severity_score",
        "ipap_1",
        "epap_0",
        "epap_1",
        "ph_0",
        "ph_1",
        "any_red_flag",
        "any_operational_criterion",
    }
)


def build_variables(values: NormalizedSnapshot, metrics: DerivedMetrics) -> Dict[str, Any]:
    return {
        "sf_0": metrics.sf_0,
        "sf_1": metrics.sf_1,
        "rr_change": metrics.rr_change,
        "hr_change": metrics.hr_change,
        "pco2_delta": metrics.pco2_delta,
        "age_months": values.age_months,
        "arf_type": values.arf_type,
        "diagnosis": values.diagnosis,
        "fio2_0": values.fio2_0,
        "fio2_1": values.fio2_1,
        "severity_score": values.severity_score,
        "ipap_1": values.ipap_1,
        "epap_0": values.epap_0,
        "epap_1": values.epap_1,
        "ph_0": values.ph_0,
        "ph_1": values.ph_1,
        "any_red_flag": values.red_flags,
        "any_operational_criterion": values.operational_criteria,
    }
