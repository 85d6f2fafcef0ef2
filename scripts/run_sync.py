"""
Script to run one full sync from the operational store to the warehouse
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_mongo_client, get_operational_db, create_bigquery_client
from core.logging import setup_logging
from ingestion.loaders.bigquery_loader import BigQueryLoader
from ingestion.loaders.schema_manager import WarehouseSchemaManager
from ingestion.runner import SyncOrchestrator

setup_logging()
logger = logging.getLogger(__name__)


async def run_sync() -> int:
    """Run a full sync and print a per-entity summary"""
    mongo_client = create_mongo_client()
    bigquery_client = create_bigquery_client()

    try:
        orchestrator = SyncOrchestrator(
            db=get_operational_db(mongo_client),
            loader=BigQueryLoader(bigquery_client),
            schema_manager=WarehouseSchemaManager(bigquery_client),
        )
        run = await orchestrator.full_sync()
    finally:
        mongo_client.close()
        bigquery_client.close()

    print(f"\nFull sync {'succeeded' if run.succeeded else 'FAILED'} in {run.duration_seconds}s")
    print(f"Dataset: {settings.GCP_PROJECT_ID}.{settings.BIGQUERY_DATASET_ID}")
    for entity_type, inserted in run.per_entity_inserted_counts.items():
        fetched = run.per_entity_fetched_counts.get(entity_type, 0)
        print(f"  {entity_type.value:<28} fetched={fetched:<6} inserted={inserted}")
    if run.error_message:
        print(f"Error: {run.error_message}")

    return 0 if run.succeeded else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(run_sync()))
