"""
Sync status and manual trigger endpoints
"""

from fastapi import APIRouter, Depends, status
from api.dependencies import get_sync_orchestrator, get_sync_scheduler
from ingestion.runner import SyncOrchestrator
from ingestion.scheduler import SyncScheduler
from schemas.api import (
    SyncRunInfo,
    SyncStatusResponse,
    SyncTriggerRequest,
    SyncTriggerResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["Sync"])


@router.get("/status", response_model=SyncStatusResponse)
async def get_sync_status(orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator)):
    """Running flag, last successful sync and the most recent runs, newest first"""
    snapshot = orchestrator.get_sync_status()
    return SyncStatusResponse(
        is_running=snapshot["is_running"],
        last_sync_at=snapshot["last_sync_at"],
        history=[SyncRunInfo.from_run(run) for run in snapshot["history"]],
    )


@router.post("/trigger", response_model=SyncTriggerResponse, status_code=status.HTTP_202_ACCEPTED)
async def trigger_sync(
    request: SyncTriggerRequest,
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
    scheduler: SyncScheduler = Depends(get_sync_scheduler)
):
    """
    Queue a one-off sync.

    The run is refused by the orchestrator if another sync is in progress;
    ``accepted`` reflects the state at request time.
    """
    if orchestrator.state.is_running:
        logger.warning(f"Manual {request.kind.value} sync requested while a sync is running")
        return SyncTriggerResponse(
            kind=request.kind,
            accepted=False,
            message="A sync is already running; try again later",
        )

    scheduler.trigger(request.kind)
    return SyncTriggerResponse(
        kind=request.kind,
        accepted=True,
        message=f"{request.kind.value} sync queued",
    )
