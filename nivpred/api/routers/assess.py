"""Stateless endpoints around the risk engine."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from ...content import load_preset, preset_names
from ...schemas.assessment import RiskAssessment
from ...schemas.snapshot import ClinicalSnapshot
from ..core.config import get_settings
from ..services.assessment_service import AssessmentService
from ..services.export_service import SnapshotImportError, import_snapshot

router = APIRouter(prefix="/api", tags=["assessment"])


class SnapshotDocument(BaseModel):
    content: str = Field(..., min_length=1)


@router.post("/assess", response_model=RiskAssessment)
def create_assessment(
    snapshot: ClinicalSnapshot,
    evaluated_at: Optional[str] = Query(default=None),
) -> RiskAssessment:
    service = AssessmentService(get_settings().policy_id)
    return service.evaluate(snapshot, evaluated_at)


@router.post("/snapshots/import", response_model=ClinicalSnapshot)
def import_document(document: SnapshotDocument) -> ClinicalSnapshot:
    try:
        return import_snapshot(document.content)
    except SnapshotImportError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/presets", response_model=List[str])
def list_presets() -> List[str]:
    return preset_names()


@router.get("/presets/{name}", response_model=ClinicalSnapshot)
def get_preset(name: str) -> ClinicalSnapshot:
    try:
        return ClinicalSnapshot.model_validate(load_preset(name))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown preset: {name}") from exc
