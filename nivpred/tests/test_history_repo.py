from __future__ import annotations

from contextlib import closing

import pytest

from nivpred.api.models.history import HistoryEntry
from nivpred.api.repositories.history_repo import HistoryRepository, connect
from nivpred.api.services.assessment_service import AssessmentService
from nivpred.content import load_preset
from nivpred.schemas import ClinicalSnapshot


@pytest.fixture
def repo(tmp_path):
    with closing(connect(tmp_path / "history.db")) as conn:
        yield HistoryRepository(conn, limit=10)


def _entry(index: int) -> HistoryEntry:
    return HistoryEntry(
        evaluated_at=f"2026-01-01T10:{index:02d}:00",
        score=index,
        tier="Low",
        brief=f"SF1-2h={200 + index}",
        snapshot_json=ClinicalSnapshot().model_dump_json(),
    )


def test_history_is_bounded_and_most_recent_first(repo):
    for index in range(12):
        repo.add(_entry(index))
    entries = repo.list()
    assert len(entries) == 10
    assert [entry.score for entry in entries] == list(range(11, 1, -1))


def test_last_snapshot_round_trip(repo):
    assert repo.load_last() is None
    snapshot = ClinicalSnapshot.model_validate(load_preset("bronchiolitis"))
    repo.save_last(snapshot, "2026-01-01T10:00:00")
    repo.save_last(snapshot, "2026-01-01T11:00:00")
    assert repo.load_last() == snapshot


def test_service_records_assessment(repo):
    snapshot = ClinicalSnapshot.model_validate(load_preset("ards"))
    assessment, entry = AssessmentService().evaluate_and_record(repo, snapshot, "2026-01-01T12:00:00")
    assert entry.id is not None
    stored = repo.get(entry.id)
    assert stored.score == assessment.score == 97
    assert stored.tier == "Very High"
    assert stored.brief == assessment.brief
    assert "Evaluated: 2026-01-01T12:00:00" in assessment.summary
    assert ClinicalSnapshot.model_validate_json(stored.snapshot_json) == snapshot


def test_clear(repo):
    repo.add(_entry(1))
    repo.save_last(ClinicalSnapshot(), "2026-01-01T10:00:00")
    repo.clear()
    assert repo.list() == []
    assert repo.load_last() is None
