"""
FastAPI application initialization
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from api.routes import health, sync
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import create_mongo_client, get_operational_db, create_bigquery_client
from core.logging import setup_logging
from ingestion.loaders.bigquery_loader import BigQueryLoader
from ingestion.loaders.schema_manager import WarehouseSchemaManager
from ingestion.runner import SyncOrchestrator
from ingestion.scheduler import SyncScheduler
from models.sync_run import SyncState
import logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build clients, orchestrator and scheduler; tear them down on exit"""
    logger.info("Starting Career Insights Sync API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(
        f"Operational store: {settings.MONGODB_DATABASE}, "
        f"warehouse: {settings.GCP_PROJECT_ID}.{settings.BIGQUERY_DATASET_ID}"
    )

    mongo_client = create_mongo_client()
    bigquery_client = create_bigquery_client()
    db = get_operational_db(mongo_client)

    orchestrator = SyncOrchestrator(
        db=db,
        loader=BigQueryLoader(bigquery_client),
        schema_manager=WarehouseSchemaManager(bigquery_client),
        state=SyncState(history_size=settings.SYNC_HISTORY_SIZE),
    )
    app.state.db = db
    app.state.orchestrator = orchestrator
    app.state.scheduler = None

    if settings.SCHEDULER_ENABLED:
        scheduler = SyncScheduler(orchestrator)
        scheduler.start()
        app.state.scheduler = scheduler
    else:
        logger.info("Scheduler disabled by configuration")

    try:
        yield
    finally:
        logger.info("Shutting down Career Insights Sync API")
        if app.state.scheduler is not None:
            await app.state.scheduler.stop()
        mongo_client.close()
        bigquery_client.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Career Insights Sync API",
        description="Moves operational career-advisor data into the analytics warehouse",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health.router)
    app.include_router(sync.router)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Career Insights Sync API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "status": "/sync/status",
                "trigger": "/sync/trigger",
            },
        }

    return app


app = create_app()
