"""Schemas describing the clinical snapshot fed into the risk engine."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator

from .common import RawValue, StrictModel

AgeUnit = Literal["days", "months", "years"]
ArfType = Literal["type1", "type2"]
Diagnosis = Literal["bronchiolitis", "pneumonia", "ards", "other"]

_DIAGNOSES = ("bronchiolitis", "pneumonia", "ards", "other")


class RedFlags(StrictModel):
    """Signs of overt decompensation; any of them forces the score floor."""

    hemodynamic_instability: bool = False
    depressed_consciousness: bool = False
    excessive_secretions: bool = False
    apnea: bool = False
    pneumothorax: bool = False

    def any(self) -> bool:
        return any(
            (
                self.hemodynamic_instability,
                self.depressed_consciousness,
                self.excessive_secretions,
                self.apnea,
                self.pneumothorax,
            )
        )


class OperationalCriteria(StrictModel):
    """Local escalation triggers. Tracked for the narrative, never scored."""

    persistent_hypoxemia: bool = False
    increased_work_of_breathing: bool = False
    worsening_hypercapnia: bool = False
    interface_intolerance: bool = False

    def any(self) -> bool:
        return any(
            (
                self.persistent_hypoxemia,
                self.increased_work_of_breathing,
                self.worsening_hypercapnia,
                self.interface_intolerance,
            )
        )


class InitiationVitals(StrictModel):
    spo2: RawValue = None
    fio2: RawValue = None
    epap: RawValue = None
    rr: RawValue = None
    hr: RawValue = None
    ph: RawValue = None
    pco2: RawValue = None


class EarlyVitals(InitiationVitals):
    """Vitals recorded 1-2 h after NIV initiation."""

    ipap: RawValue = None


class ClinicalSnapshot(StrictModel):
    age_value: RawValue = None
    age_unit: AgeUnit = "months"
    arf_type: ArfType = "type2"
    diagnosis: Diagnosis = "bronchiolitis"
    severity_score: RawValue = None
    red_flags: RedFlags = Field(default_factory=RedFlags)
    operational_criteria: OperationalCriteria = Field(default_factory=OperationalCriteria)
    initiation: InitiationVitals = Field(default_factory=InitiationVitals)
    early: EarlyVitals = Field(default_factory=EarlyVitals)

    @field_validator("age_unit", mode="before")
    @classmethod
    def _known_age_unit(cls, value: object) -> object:
        # Anything other than days or years is read as months.
        normalized = str(value).strip().lower() if value is not None else ""
        return normalized if normalized in ("days", "years") else "months"

    @field_validator("arf_type", mode="before")
    @classmethod
    def _known_arf_type(cls, value: object) -> object:
        normalized = str(value).strip().lower() if value is not None else ""
        return "type1" if normalized == "type1" else "type2"

    @field_validator("diagnosis", mode="before")
    @classmethod
    def _known_diagnosis(cls, value: object) -> object:
        if value is None:
            return "bronchiolitis"
        normalized = str(value).strip().lower()
        return normalized if normalized in _DIAGNOSES else "other"
