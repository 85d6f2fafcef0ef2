"""
Client factories for the operational store (MongoDB via Motor) and the
analytical warehouse (BigQuery)
"""

from pathlib import Path
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from google.cloud import bigquery
from core.config import settings
from core.exceptions import OperationalStoreError
import logging

logger = logging.getLogger(__name__)


def create_mongo_client(uri: Optional[str] = None) -> AsyncIOMotorClient:
    """Create Motor client (connects lazily on first operation)"""
    return AsyncIOMotorClient(
        uri or settings.MONGODB_URI,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        socketTimeoutMS=45000,
        maxPoolSize=10,
        retryReads=True,
    )


def get_operational_db(
    client: AsyncIOMotorClient,
    database: Optional[str] = None
) -> AsyncIOMotorDatabase:
    """Get operational database handle"""
    return client[database or settings.MONGODB_DATABASE]


async def ping_operational_store(db: AsyncIOMotorDatabase) -> None:
    """Round-trip to the store; raises OperationalStoreError if unreachable"""
    try:
        await db.command("ping")
    except Exception as e:
        raise OperationalStoreError(
            "Operational store is unreachable",
            context={"database": db.name},
            original_exception=e
        )


def create_bigquery_client(project_id: Optional[str] = None) -> bigquery.Client:
    """
    Create BigQuery client.

    Uses the service account key file when GOOGLE_APPLICATION_CREDENTIALS
    points at one, otherwise application default credentials.
    """
    project = project_id or settings.GCP_PROJECT_ID
    key_file = settings.GOOGLE_APPLICATION_CREDENTIALS

    if key_file and Path(key_file).exists():
        logger.info("Using service account key file for BigQuery")
        return bigquery.Client.from_service_account_json(key_file, project=project)

    logger.info("Using application default credentials for BigQuery")
    return bigquery.Client(project=project, location=settings.BIGQUERY_LOCATION)
