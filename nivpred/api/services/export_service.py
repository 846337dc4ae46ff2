"""Serialise clinical snapshots to and from portable JSON documents."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ...schemas.snapshot import ClinicalSnapshot

APP_TAG = "nivpred_v1"

# Metadata keys written by exporters (ours and the legacy form app).
_METADATA_KEYS = {"app", "exported_at", "exportedAt", "savedAt"}

_LEGACY_TOP = {
    "ageValue": "age_value",
    "ageUnit": "age_unit",
    "arfType": "arf_type",
    "diag": "diagnosis",
    "prism": "severity_score",
}
_LEGACY_RED_FLAGS = {
    "rfHemodyn": "hemodynamic_instability",
    "rfGcs": "depressed_consciousness",
    "rfSecretions": "excessive_secretions",
    "rfApnea": "apnea",
    "rfPtx": "pneumothorax",
}
_LEGACY_CRITERIA = {
    "cfHypox": "persistent_hypoxemia",
    "cfWork": "increased_work_of_breathing",
    "cfHypercap": "worsening_hypercapnia",
    "cfIntol": "interface_intolerance",
}
_LEGACY_VITALS = ("spo2", "fio2", "epap", "ipap", "rr", "hr", "ph", "pco2")


class SnapshotImportError(ValueError):
    """Raised when a document cannot be turned into a snapshot."""


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _is_legacy(document: Mapping[str, Any]) -> bool:
    return any(key in document for key in _LEGACY_TOP) or any(
        key.endswith(("_0", "_1")) for key in document
    )


def from_legacy_form(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Map the flat form layout (``ageValue``, ``spo2_0``, ``rfApnea`` ...) to the nested one."""

    nested: Dict[str, Any] = {"red_flags": {}, "operational_criteria": {}, "initiation": {}, "early": {}}
    for legacy, field in _LEGACY_TOP.items():
        value = _blank_to_none(document.get(legacy))
        if value is not None:
            nested[field] = value
    for legacy, field in _LEGACY_RED_FLAGS.items():
        nested["red_flags"][field] = bool(document.get(legacy))
    for legacy, field in _LEGACY_CRITERIA.items():
        nested["operational_criteria"][field] = bool(document.get(legacy))
    for name in _LEGACY_VITALS:
        for suffix, section in (("_0", "initiation"), ("_1", "early")):
            if name == "ipap" and section == "initiation":
                continue
            value = _blank_to_none(document.get(name + suffix))
            if value is not None:
                nested[section][name] = value
    return nested


def snapshot_from_document(document: Any) -> ClinicalSnapshot:
    if not isinstance(document, dict):
        raise SnapshotImportError("Snapshot document must be a JSON object")
    payload = {key: value for key, value in document.items() if key not in _METADATA_KEYS}
    if _is_legacy(payload):
        payload = from_legacy_form(payload)
    try:
        return ClinicalSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotImportError(f"Invalid snapshot document: {exc.error_count()} error(s)") from exc


def import_snapshot(text: str) -> ClinicalSnapshot:
    try:
        document = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise SnapshotImportError(f"Invalid JSON: {exc.msg}") from exc
    return snapshot_from_document(document)


def export_snapshot(snapshot: ClinicalSnapshot, exported_at: Optional[str] = None) -> str:
    payload = snapshot.model_dump(mode="json")
    payload["app"] = APP_TAG
    if exported_at:
        payload["exported_at"] = exported_at
    return json.dumps(payload, ensure_ascii=False, indent=2)
