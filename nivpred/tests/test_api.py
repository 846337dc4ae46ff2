from __future__ import annotations

import json

from fastapi.testclient import TestClient

from nivpred.api.main import app
from nivpred.content import load_preset

client = TestClient(app)


def test_healthcheck():
    response = client.get("/health/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "policy": "niv_failure", "policy_version": "1.0.0"}


def test_assess_preset():
    response = client.post("/api/assess", json=load_preset("ards"))
    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 97
    assert data["tier"] == "Very High"
    assert data["badge"] == "HIGH RISK"
    assert data["top_factors"] == ["SF 1-2 h < 150 (SF=120)", "RR drop < 10%", "ARDS"]


def test_assess_echoes_timestamp_into_summary():
    response = client.post("/api/assess", params={"evaluated_at": "2026-05-05 07:00"}, json={})
    assert response.status_code == 200
    assert "Evaluated: 2026-05-05 07:00" in response.json()["summary"]


def test_assess_rejects_unknown_fields():
    response = client.post("/api/assess", json={"initiation": {"lactate": "4"}})
    assert response.status_code == 422


def test_import_legacy_document():
    content = json.dumps({"ageValue": "2", "ageUnit": "years", "spo2_1": "95", "fio2_1": "40"})
    response = client.post("/api/snapshots/import", json={"content": content})
    assert response.status_code == 200
    data = response.json()
    assert data["age_unit"] == "years"
    assert data["early"]["fio2"] == "40"


def test_import_invalid_document():
    response = client.post("/api/snapshots/import", json={"content": "{oops"})
    assert response.status_code == 422
    assert "Invalid JSON" in response.json()["detail"]


def test_presets():
    assert client.get("/api/presets").json() == ["ards", "bronchiolitis"]
    response = client.get("/api/presets/bronchiolitis")
    assert response.status_code == 200
    assert response.json()["diagnosis"] == "bronchiolitis"
    assert client.get("/api/presets/unknown").status_code == 404
