from __future__ import annotations

import json

import pytest

from nivpred.api.services.export_service import (
    APP_TAG,
    SnapshotImportError,
    export_snapshot,
    import_snapshot,
)
from nivpred.content import load_preset
from nivpred.core.orchestrator import assess
from nivpred.schemas import ClinicalSnapshot


def test_export_then_import_keeps_snapshot():
    snapshot = ClinicalSnapshot.model_validate(load_preset("ards"))
    document = export_snapshot(snapshot, exported_at="2026-02-02T10:00:00+00:00")
    payload = json.loads(document)
    assert payload["app"] == APP_TAG
    assert payload["exported_at"] == "2026-02-02T10:00:00+00:00"
    assert import_snapshot(document) == snapshot


def test_import_legacy_form_document():
    legacy = {
        "ageValue": "3",
        "ageUnit": "months",
        "arfType": "type2",
        "diag": "bronchiolitis",
        "prism": "",
        "rfHemodyn": False,
        "rfApnea": True,
        "cfIntol": True,
        "spo2_0": "90",
        "fio2_0": "0.60",
        "epap_0": "6",
        "rr_0": "65",
        "spo2_1": "90",
        "fio2_1": "60",
        "rr_1": "",
        "ipap_1": "14",
        "exportedAt": "2025-11-02T10:00:00.000Z",
        "app": "vni_pred_v1",
    }
    snapshot = import_snapshot(json.dumps(legacy))
    assert snapshot.age_value == "3"
    assert snapshot.severity_score is None
    assert snapshot.red_flags.apnea is True
    assert snapshot.red_flags.hemodynamic_instability is False
    assert snapshot.operational_criteria.interface_intolerance is True
    assert snapshot.initiation.epap == "6"
    assert snapshot.early.ipap == "14"
    assert snapshot.early.rr is None
    assert assess(snapshot).score == 85


@pytest.mark.parametrize("text", ["{not json", "[1, 2]", '"text"', '{"lactate": 3}', '{"red_flags": {"apnea": "maybe"}}'])
def test_malformed_documents_raise_import_error(text):
    with pytest.raises(SnapshotImportError):
        import_snapshot(text)


def test_empty_document_is_an_empty_snapshot():
    assert import_snapshot("") == ClinicalSnapshot()


def test_null_enum_fields_import_as_defaults():
    snapshot = import_snapshot('{"arf_type": null, "age_unit": null}')
    assert snapshot == ClinicalSnapshot()
