"""
FastAPI dependencies resolving the objects built by the app lifespan
"""

from fastapi import HTTPException, Request
from motor.motor_asyncio import AsyncIOMotorDatabase
from ingestion.runner import SyncOrchestrator
from ingestion.scheduler import SyncScheduler


def get_operational_database(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


def get_sync_orchestrator(request: Request) -> SyncOrchestrator:
    return request.app.state.orchestrator


def get_sync_scheduler(request: Request) -> SyncScheduler:
    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is None:
        raise HTTPException(status_code=503, detail="Scheduler is disabled")
    return scheduler
