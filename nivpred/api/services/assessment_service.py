"""Glue between callers, the risk engine and the local history store."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from ...core.orchestrator import assess
from ...schemas.assessment import RiskAssessment
from ...schemas.snapshot import ClinicalSnapshot
from ..models.history import HistoryEntry
from ..repositories.history_repo import HistoryRepository

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class AssessmentService:
    """Run assessments and, when asked, record them in the local history."""

    def __init__(self, policy_id: str = "niv_failure") -> None:
        self.policy_id = policy_id

    def evaluate(self, snapshot: ClinicalSnapshot, evaluated_at: Optional[str] = None) -> RiskAssessment:
        return assess(snapshot, evaluated_at=evaluated_at, policy_id=self.policy_id)

    def evaluate_and_record(
        self,
        repo: HistoryRepository,
        snapshot: ClinicalSnapshot,
        evaluated_at: Optional[str] = None,
    ) -> Tuple[RiskAssessment, HistoryEntry]:
        evaluated_at = evaluated_at or now_iso()
        assessment = self.evaluate(snapshot, evaluated_at)
        repo.save_last(snapshot, evaluated_at)
        entry = repo.add(
            HistoryEntry(
                evaluated_at=evaluated_at,
                score=assessment.score,
                tier=assessment.tier,
                brief=assessment.brief,
                snapshot_json=snapshot.model_dump_json(),
            )
        )
        logger.info("Recorded assessment %s (tier=%s)", entry.id, assessment.tier)
        return assessment, entry
