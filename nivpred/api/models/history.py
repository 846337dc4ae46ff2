"""Local history record representation using dataclasses."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class HistoryEntry:
    evaluated_at: str
    score: int
    tier: str
    brief: str
    snapshot_json: str
    id: Optional[int] = None
