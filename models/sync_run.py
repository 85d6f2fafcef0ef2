from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional
from pydantic import BaseModel, Field
from models.base import EntityType, SyncKind


class SyncRun(BaseModel):
    """
    Outcome of one orchestrator invocation.

    Built once when the run finishes and never mutated afterwards.
    ``per_entity_inserted_counts[e] <= per_entity_fetched_counts[e]`` holds
    for every entity type processed.
    """
    kind: SyncKind
    started_at: datetime
    duration_seconds: float = 0.0
    per_entity_inserted_counts: Dict[EntityType, int] = Field(default_factory=dict)
    per_entity_fetched_counts: Dict[EntityType, int] = Field(default_factory=dict)
    succeeded: bool = False
    window_minutes: Optional[int] = None
    error_message: Optional[str] = None

    class Config:
        frozen = True

    @property
    def total_inserted(self) -> int:
        return sum(self.per_entity_inserted_counts.values())


class SyncState:
    """
    Run state owned by a single orchestrator.

    ``is_running`` is the mutex flag; only the orchestrator's run entry/exit
    writes it. ``history`` keeps the most recent runs first and evicts the
    oldest beyond ``history_size``.
    """

    def __init__(self, history_size: int = 10):
        self.is_running: bool = False
        self.last_sync_at: Optional[datetime] = None
        self.history: Deque[SyncRun] = deque(maxlen=history_size)

    def record(self, run: SyncRun) -> None:
        self.history.appendleft(run)

    def snapshot(self) -> Dict[str, Any]:
        """Status view for operational dashboards"""
        history: List[SyncRun] = list(self.history)
        return {
            "is_running": self.is_running,
            "last_sync_at": self.last_sync_at,
            "history": history,
        }
