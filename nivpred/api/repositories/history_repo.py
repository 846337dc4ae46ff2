"""Single-user, on-disk store for the last snapshot and recent assessments."""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from ...schemas.snapshot import ClinicalSnapshot
from ..models.history import HistoryEntry

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS history (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        evaluated_at TEXT NOT NULL,
        score INTEGER NOT NULL,
        tier TEXT NOT NULL,
        brief TEXT NOT NULL,
        snapshot_json TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS last_snapshot (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        saved_at TEXT NOT NULL,
        snapshot_json TEXT NOT NULL
    )
    """,
)


def connect(path: Path) -> sqlite3.Connection:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    for statement in _SCHEMA:
        conn.execute(statement)
    conn.commit()
    return conn


class HistoryRepository:
    """Bounded, most-recent-first history of assessments."""

    def __init__(self, conn: sqlite3.Connection, limit: int = 10):
        self.conn = conn
        self.limit = limit

    def add(self, entry: HistoryEntry) -> HistoryEntry:
        cursor = self.conn.execute(
            """
            INSERT INTO history (evaluated_at, score, tier, brief, snapshot_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            (entry.evaluated_at, entry.score, entry.tier, entry.brief, entry.snapshot_json),
        )
        entry.id = cursor.lastrowid
        trimmed = self.conn.execute(
            """
            DELETE FROM history WHERE id NOT IN (
                SELECT id FROM history ORDER BY id DESC LIMIT ?
            )
            """,
            (self.limit,),
        ).rowcount
        self.conn.commit()
        if trimmed:
            logger.debug("Trimmed %d history entries beyond limit %d", trimmed, self.limit)
        return entry

    def list(self) -> List[HistoryEntry]:
        cursor = self.conn.execute("SELECT * FROM history ORDER BY id DESC LIMIT ?", (self.limit,))
        return [self._row_to_model(row) for row in cursor.fetchall()]

    def get(self, entry_id: int) -> Optional[HistoryEntry]:
        row = self.conn.execute("SELECT * FROM history WHERE id = ?", (entry_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def save_last(self, snapshot: ClinicalSnapshot, saved_at: str) -> None:
        self.conn.execute(
            """
            INSERT INTO last_snapshot (id, saved_at, snapshot_json) VALUES (1, ?, ?)
            ON CONFLICT(id) DO UPDATE SET saved_at = excluded.saved_at, snapshot_json = excluded.snapshot_json
            """,
            (saved_at, snapshot.model_dump_json()),
        )
        self.conn.commit()

    def load_last(self) -> Optional[ClinicalSnapshot]:
        row = self.conn.execute("SELECT snapshot_json FROM last_snapshot WHERE id = 1").fetchone()
        if not row:
            return None
        return ClinicalSnapshot.model_validate_json(row["snapshot_json"])

    def clear(self) -> None:
        self.conn.execute("DELETE FROM history")
        self.conn.execute("DELETE FROM last_snapshot")
        self.conn.commit()

    def _row_to_model(self, row: sqlite3.Row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            evaluated_at=row["evaluated_at"],
            score=row["score"],
            tier=row["tier"],
            brief=row["brief"],
            snapshot_json=row["snapshot_json"],
        )
