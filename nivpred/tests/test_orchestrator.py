from __future__ import annotations

import pytest
from pydantic import ValidationError

from nivpred.content import load_preset
from nivpred.core.classifier import classify
from nivpred.core.orchestrator import assess
from nivpred.core.scores import load_policy
from nivpred.schemas import ClinicalSnapshot

ALL_RED_FLAGS = {
    "hemodynamic_instability": True,
    "depressed_consciousness": True,
    "excessive_secretions": True,
    "apnea": True,
    "pneumothorax": True,
}


def _worst_case() -> dict:
    return {
        "age_value": "2",
        "age_unit": "months",
        "arf_type": "type1",
        "diagnosis": "ards",
        "severity_score": "12",
        "initiation": {"spo2": "85", "fio2": "90", "rr": "60", "hr": "170", "ph": "7.30", "pco2": "50"},
        "early": {"spo2": "84", "fio2": "90", "rr": "66", "hr": "180", "ph": "7.20", "pco2": "60", "ipap": "20"},
    }


def _best_case() -> dict:
    return {
        "age_value": "4",
        "age_unit": "years",
        "arf_type": "type2",
        "diagnosis": "other",
        "severity_score": "0",
        "initiation": {"spo2": "92", "fio2": "0.30", "rr": "50", "hr": "150", "ph": "7.30", "pco2": "60"},
        "early": {"spo2": "98", "fio2": "0.30", "rr": "30", "hr": "120", "ph": "7.38", "pco2": "45", "ipap": "10"},
    }


def test_scenario_a_ratio_of_exactly_150_is_not_below_150():
    snapshot = {
        "age_value": "3",
        "age_unit": "months",
        "arf_type": "type2",
        "diagnosis": "bronchiolitis",
        "early": {"spo2": "90", "fio2": "60"},
    }
    result = assess(snapshot)
    assert result.sf_early == pytest.approx(150)
    # SF 30 + RR unknown 6 + HR unknown 3 + age < 6 months 10
    assert result.score == 49
    assert result.tier == "Intermediate"
    assert result.badge == "RISK ↔"
    assert result.top_factors == ("SF 1-2 h < 193 (SF=150)", "Age < 6 months")


def test_scenario_a_just_below_150_takes_heaviest_band():
    snapshot = {"age_value": "3", "early": {"spo2": "89", "fio2": "60"}}
    result = assess(snapshot)
    assert result.sf_early < 150
    assert result.score == 59
    assert result.factors[0].weight == 40


def test_scenario_b_red_flags_with_empty_fields():
    result = assess({"red_flags": ALL_RED_FLAGS})
    assert result.score == 85
    assert result.tier == "Very High"
    assert result.badge == "HIGH RISK"
    assert result.red_flags is True
    assert result.top_factors == ("Clinical red flags",)
    assert result.notes[0].startswith("Clinical red flags are present")
    assert "Red flags: YES" in result.summary


def test_red_flag_is_a_floor_not_a_reset():
    preset = load_preset("ards")
    baseline = assess(preset)
    flagged = assess(dict(preset, red_flags={"apnea": True}))
    assert baseline.score == 97
    assert flagged.score == 97
    assert flagged.top_factors[0] == "Clinical red flags"


@pytest.mark.parametrize("flag", sorted(ALL_RED_FLAGS))
def test_any_single_red_flag_forces_very_high(flag):
    result = assess(dict(_best_case(), red_flags={flag: True}))
    assert result.score >= 85
    assert result.tier == "Very High"


def test_scenario_d_unchanged_rr_scores_as_no_improvement():
    result = assess({"initiation": {"rr": "40"}, "early": {"rr": "40"}})
    assert result.rr_change_pct == 0
    assert result.factors[0].label == "RR not improved or worse"
    assert result.factors[0].weight == 18


def test_operational_criteria_do_not_change_score():
    base = _best_case()
    flagged = dict(base, operational_criteria={"interface_intolerance": True})
    assert assess(base).score == assess(flagged).score
    result = assess(flagged)
    assert result.operational_criteria is True
    assert result.actions[0].startswith("Escalation triggers are flagged")


def test_score_is_clamped_to_100():
    result = assess(_worst_case())
    assert result.score == 100
    assert result.tier == "Very High"


def test_lowest_possible_inputs_score_low():
    result = assess(_best_case())
    # SF 3 + RR 2 + HR 1 + age 2 + FiO2 1 + CO2 falling 1
    assert result.score == 10
    assert result.tier == "Low"
    assert result.factors == ()
    assert result.explanation == "No strong high-risk signals with the data provided."


def test_empty_snapshot_uses_conservative_fallbacks():
    result = assess({})
    assert result.score == 23
    assert result.sf_early is None
    assert result.rr_change_pct is None
    assert result.brief == ""
    assert result.oxygenation_context is None
    assert result.factors == ()


@pytest.mark.parametrize("low, high", [(260, 259), (220, 219), (193, 192), (150, 149)])
def test_score_rises_when_sf_crosses_a_threshold(low, high):
    def score(sf):
        return assess({"early": {"spo2": str(sf), "fio2": "1"}}).score

    assert score(high) > score(low)


def test_score_flat_within_a_band():
    def score(sf):
        return assess({"early": {"spo2": str(sf), "fio2": "1"}}).score

    assert score(259) == score(258) == score(221)


def test_initiation_fio2_percent_is_normalised_before_scoring():
    as_percent = assess({"initiation": {"fio2": "60"}})
    as_fraction = assess({"initiation": {"fio2": "0.6"}})
    assert as_percent.score == as_fraction.score == 28


def test_bronchiolitis_preset():
    result = assess(load_preset("bronchiolitis"))
    assert result.score == 40
    assert result.tier == "Low"
    assert result.badge == "RISK ↓"
    assert result.top_factors == ("SF 1-2 h 193-219 (SF=209)", "Age < 6 months")
    assert result.brief == "SF1-2h=209 | ΔRR=-23% | ΔHR=-12%"
    assert result.oxygenation_context == "SF acceptable • FiO₂ low/moderate (<0.50)"
    assert result.pco2_delta == pytest.approx(-10)


def test_ards_preset_ties_keep_evaluation_order():
    result = assess(load_preset("ards"))
    assert result.score == 97
    assert result.tier == "Very High"
    # RR drop and ARDS both weigh 12; RR is evaluated first.
    assert result.top_factors == ("SF 1-2 h < 150 (SF=120)", "RR drop < 10%", "ARDS")
    assert [factor.weight for factor in result.factors] == [40, 12, 12, 10]


def test_assessment_is_idempotent():
    snapshot = ClinicalSnapshot.model_validate(load_preset("ards"))
    assert assess(snapshot) == assess(snapshot)
    assert assess(snapshot, evaluated_at="2026-01-01T08:00") == assess(snapshot, evaluated_at="2026-01-01T08:00")


def test_assessment_is_frozen():
    result = assess({})
    with pytest.raises(ValidationError):
        result.score = 3


def test_tiers_partition_score_range():
    policy = load_policy()
    for score in range(0, 101):
        tier, _ = classify(score, policy)
        if score >= 85:
            assert tier == "Very High"
        elif score >= 65:
            assert tier == "High"
        elif score >= 45:
            assert tier == "Intermediate"
        else:
            assert tier == "Low"


def test_badges():
    policy = load_policy()
    assert classify(85, policy) == ("Very High", "HIGH RISK")
    assert classify(84, policy) == ("High", "RISK ↑")
    assert classify(64, policy) == ("Intermediate", "RISK ↔")
    assert classify(44, policy) == ("Low", "RISK ↓")


def test_unknown_diagnosis_counts_as_other():
    snapshot = ClinicalSnapshot(diagnosis="Asthma")
    assert snapshot.diagnosis == "other"


def test_unexpected_field_is_rejected():
    with pytest.raises(ValidationError):
        ClinicalSnapshot.model_validate({"lactate": "3"})


def test_null_arf_type_and_age_unit_use_defaults():
    snapshot = ClinicalSnapshot.model_validate({"age_value": "5", "arf_type": None, "age_unit": None})
    assert snapshot.arf_type == "type2"
    assert snapshot.age_unit == "months"
    assert assess({"arf_type": None, "age_unit": None}).score == assess({}).score


@pytest.mark.parametrize("arf_type, expected", [("TYPE1", "type1"), ("hypoxemic", "type2"), (2, "type2")])
def test_only_type1_reads_as_hypoxemic(arf_type, expected):
    assert ClinicalSnapshot(arf_type=arf_type).arf_type == expected


def test_unrecognised_age_unit_reads_as_months():
    snapshot = ClinicalSnapshot(age_value="5", age_unit="weeks")
    assert snapshot.age_unit == "months"
    assert "Age < 6 months" in assess(snapshot).top_factors
