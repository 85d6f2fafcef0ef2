"""
Domain models for the sync pipeline.

Models:
    base: Shared enums (EntityType, SyncKind, PartitionType) and the fixed
        per-kind entity processing order
    warehouse: Warehouse table declarations (columns, partitioning, clustering)
    sync_run: SyncRun results and the orchestrator-owned SyncState

Usage:
    from models.base import EntityType, SyncKind
    from models.warehouse import WAREHOUSE_TABLES, table_for
    from models.sync_run import SyncRun, SyncState

Tables:
    Eight warehouse tables, one per EntityType. Day-partitioned tables are
    partitioned on ``eventDate``; ``skills_trends`` is month-partitioned on
    ``timestamp``; ``roi_metrics`` and ``roadmap_progress`` are clustered
    only.
"""

__all__ = [
    "EntityType",
    "SyncKind",
    "PartitionType",
    "Column",
    "WarehouseTable",
    "WAREHOUSE_TABLES",
    "SyncRun",
    "SyncState",
]
