"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from models.base import EntityType, SyncKind
from models.sync_run import SyncRun

# ============================================================================
# Sync Status Schemas
# ============================================================================

class SyncRunInfo(BaseModel):
    """One entry of the run history"""
    kind: SyncKind
    started_at: datetime
    duration_seconds: float
    per_entity_inserted_counts: Dict[EntityType, int] = Field(default_factory=dict)
    succeeded: bool
    window_minutes: Optional[int] = None
    error_message: Optional[str] = None

    class Config:
        from_attributes = True
        use_enum_values = True

    @classmethod
    def from_run(cls, run: SyncRun) -> "SyncRunInfo":
        return cls.model_validate(run, from_attributes=True)


class SyncStatusResponse(BaseModel):
    """Sync status for operational dashboards"""
    is_running: bool
    last_sync_at: Optional[datetime] = None
    history: List[SyncRunInfo] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "is_running": False,
                "last_sync_at": "2024-01-15T02:00:41Z",
                "history": [
                    {
                        "kind": "full",
                        "started_at": "2024-01-15T02:00:00Z",
                        "duration_seconds": 41.2,
                        "per_entity_inserted_counts": {
                            "user_activity": 1200,
                            "ats_score": 310
                        },
                        "succeeded": True
                    }
                ]
            }
        }


# ============================================================================
# Manual Trigger Schemas
# ============================================================================

class SyncTriggerRequest(BaseModel):
    """Manual sync trigger"""
    kind: SyncKind = Field(default=SyncKind.INCREMENTAL, description="full, incremental or weekly_aggregate")


class SyncTriggerResponse(BaseModel):
    kind: SyncKind
    accepted: bool
    message: str


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    operational_store_connected: bool
    sync_running: bool
    last_sync_at: Optional[datetime] = None
    last_run_succeeded: Optional[bool] = None
