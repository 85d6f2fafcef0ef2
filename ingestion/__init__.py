"""
Sync pipeline from the operational store to the analytics warehouse.

Modules:
    base: Abstract base class for entity sources (extract + transform)
    runner: Sync orchestrator for full, incremental and weekly aggregate runs
    scheduler: APScheduler integration firing the orchestrator on cron cadences
    merge: One-shot migration and natural-key merge between databases

Subpackages:
    extractors: One EntitySource per warehouse table, plus ``build_sources``
    transformers: Row mapping and the enrichment rules
    loaders: BigQuery streaming writer and schema provisioning

Architecture:
    Each run processes entity types sequentially in a fixed order:

    1. Extract - Read newest-first records, optionally since a window start
    2. Transform - Map each record to a validated warehouse row
    3. Load - Stream rows into the entity's table in batches

    An entity that fails counts 0 inserted rows; the others still run.

Usage:
    from ingestion.runner import SyncOrchestrator
    from ingestion.loaders.bigquery_loader import BigQueryLoader
    from ingestion.loaders.schema_manager import WarehouseSchemaManager

Example:
    orchestrator = SyncOrchestrator(
        db=get_operational_db(mongo_client),
        loader=BigQueryLoader(bigquery_client),
        schema_manager=WarehouseSchemaManager(bigquery_client),
    )
    run = await orchestrator.incremental_sync(window_minutes=60)

    print(run.per_entity_inserted_counts)
"""

__all__ = [
    "EntitySource",
    "SyncOrchestrator",
    "SyncScheduler",
    "BigQueryLoader",
    "WarehouseSchemaManager",
    "merge_collections",
    "migrate_database",
]
