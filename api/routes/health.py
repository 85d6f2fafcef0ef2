"""
Health check endpoint with operational store and sync status
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from api.dependencies import get_operational_database, get_sync_orchestrator
from core.database import ping_operational_store
from core.exceptions import OperationalStoreError
from ingestion.runner import SyncOrchestrator
from schemas.api import HealthCheckResponse
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncIOMotorDatabase = Depends(get_operational_database),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator)
):
    """
    Health check endpoint.

    Returns:
    - Operational store connectivity
    - Whether a sync is running and how the last one ended
    """
    store_connected = False
    try:
        await ping_operational_store(db)
        store_connected = True
    except OperationalStoreError as e:
        logger.error(f"Operational store check failed: {e}")

    status = orchestrator.get_sync_status()
    history = status["history"]
    last_run_succeeded = history[0].succeeded if history else None

    if not store_connected:
        overall = "unhealthy"
    elif last_run_succeeded is False:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthCheckResponse(
        status=overall,
        timestamp=datetime.utcnow(),
        operational_store_connected=store_connected,
        sync_running=status["is_running"],
        last_sync_at=status["last_sync_at"],
        last_run_succeeded=last_run_succeeded,
    )
