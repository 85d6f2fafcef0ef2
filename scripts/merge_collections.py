"""
One-shot migration of operational collections into the service database.

Configured only by environment: MONGODB_URI, MIGRATION_SOURCE_DATABASE,
MIGRATION_TARGET_DATABASE. Source collections are never modified.
"""

import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_mongo_client
from core.exceptions import MergeError
from core.logging import setup_logging
from ingestion.merge import migrate_database

setup_logging()
logger = logging.getLogger(__name__)


async def main() -> int:
    source_name = settings.MIGRATION_SOURCE_DATABASE
    target_name = settings.MIGRATION_TARGET_DATABASE
    logger.info(f"Starting migration {source_name} -> {target_name}")

    client = create_mongo_client()
    try:
        report = await migrate_database(client[source_name], client[target_name])
    except MergeError as e:
        logger.error(f"Migration failed: {e}", extra={"error_context": e.to_dict()})
        return 1
    finally:
        client.close()

    print("\nMigration summary")
    for name, entry in report.collections.items():
        print(
            f"  {name:<28} {entry.action.value:<17} "
            f"source={entry.source_count} inserted={entry.inserted} updated={entry.updated}"
        )
    print("\nTarget collections")
    for name, count in report.final_counts.items():
        print(f"  {name:<28} {count} documents")
    if report.needs_review:
        print(f"\nManual review needed for: {', '.join(report.needs_review)}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
