"""
Script to provision the warehouse dataset and tables
"""

import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_bigquery_client
from core.exceptions import SchemaProvisioningError
from core.logging import setup_logging
from ingestion.loaders.schema_manager import WarehouseSchemaManager

setup_logging()
logger = logging.getLogger(__name__)


async def init_warehouse() -> int:
    logger.info(f"Provisioning {settings.GCP_PROJECT_ID}.{settings.BIGQUERY_DATASET_ID}...")
    client = create_bigquery_client()

    try:
        manager = WarehouseSchemaManager(client)
        await manager.check_connection()
        report = await manager.ensure_schema()
    except SchemaProvisioningError as e:
        logger.error(f"Warehouse provisioning failed: {e}", extra={"error_context": e.to_dict()})
        return 1
    finally:
        client.close()

    for name in report.tables_created:
        logger.info(f"  created  {name}")
    for name in report.tables_existing:
        logger.info(f"  exists   {name}")
    logger.info("Warehouse initialized successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(init_warehouse()))
