# ============================================================================
# File: ingestion/runner.py
# Description: Sync orchestrator moving operational entities to the warehouse
# ============================================================================
"""
Sync Orchestrator - runs full, incremental and weekly aggregate syncs.

This module provides:
- Single-flight runs guarded by the ``SyncState.is_running`` flag
- Per-entity isolation (one entity failing never aborts the others)
- Run history with fetched and inserted counts per entity
- Dashboard cache invalidation once new rows land
"""

import time
from typing import Dict, Any, Iterable, Optional, Tuple
from datetime import datetime, timedelta
from motor.motor_asyncio import AsyncIOMotorDatabase
import logging

from ingestion.base import EntitySource
from ingestion.extractors import build_sources
from ingestion.loaders.bigquery_loader import BigQueryLoader
from ingestion.loaders.schema_manager import WarehouseSchemaManager
from models.base import (
    EntityType,
    SyncKind,
    FULL_SYNC_ENTITIES,
    INCREMENTAL_SYNC_ENTITIES,
    WEEKLY_AGGREGATE_ENTITIES,
)
from models.sync_run import SyncRun, SyncState
from core.cache import TTLCache, cache, invalidate_insights
from core.config import settings
from core.database import ping_operational_store
from core.exceptions import ETLException, PartialInsertError

logger = logging.getLogger(__name__)

SYNC_ALREADY_RUNNING = "sync already running"


class SyncOrchestrator:
    """
    Sync Orchestrator

    Responsibilities:
    - Orchestrate Extract → Transform → Load per entity type
    - Enforce at most one run at a time
    - Provision the warehouse schema on first use
    - Record every run in the bounded history
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        loader: BigQueryLoader,
        schema_manager: WarehouseSchemaManager,
        state: Optional[SyncState] = None,
        sources: Optional[Dict[EntityType, EntitySource]] = None,
        cache_target: Optional[TTLCache] = None
    ):
        self.db = db
        self.loader = loader
        self.schema_manager = schema_manager
        self.state = state if state is not None else SyncState(history_size=settings.SYNC_HISTORY_SIZE)
        self.sources = sources if sources is not None else build_sources(db)
        self.cache_target = cache_target if cache_target is not None else cache
        self._schema_ready = False

    async def full_sync(self) -> SyncRun:
        """Sync every entity type except the weekly aggregates"""
        return await self._run(SyncKind.FULL, FULL_SYNC_ENTITIES)

    async def incremental_sync(self, window_minutes: Optional[int] = None) -> SyncRun:
        """Sync records changed within the last ``window_minutes``"""
        if window_minutes is None:
            window_minutes = settings.INCREMENTAL_WINDOW_MINUTES
        return await self._run(SyncKind.INCREMENTAL, INCREMENTAL_SYNC_ENTITIES, window_minutes=window_minutes)

    async def weekly_aggregate_sync(self) -> None:
        """Compute ROI metrics per career domain; the run lands in history"""
        await self._run(SyncKind.WEEKLY_AGGREGATE, WEEKLY_AGGREGATE_ENTITIES)

    async def run(self, kind: SyncKind) -> Optional[SyncRun]:
        """Dispatch by kind (scheduler jobs and manual triggers)"""
        if kind == SyncKind.FULL:
            return await self.full_sync()
        if kind == SyncKind.INCREMENTAL:
            return await self.incremental_sync()
        if kind == SyncKind.WEEKLY_AGGREGATE:
            return await self.weekly_aggregate_sync()
        raise ValueError(f"Unknown sync kind: {kind}")

    def get_sync_status(self) -> Dict[str, Any]:
        return self.state.snapshot()

    async def _run(
        self,
        kind: SyncKind,
        entity_types: Iterable[EntityType],
        window_minutes: Optional[int] = None
    ) -> SyncRun:
        started_at = datetime.utcnow()

        if self.state.is_running:
            logger.warning(f"Skipping {kind.value} sync: another sync is in progress")
            return SyncRun(
                kind=kind,
                started_at=started_at,
                succeeded=False,
                window_minutes=window_minutes,
                error_message=SYNC_ALREADY_RUNNING,
            )

        self.state.is_running = True
        clock_start = time.monotonic()
        inserted_counts: Dict[EntityType, int] = {}
        fetched_counts: Dict[EntityType, int] = {}
        error_message = None
        succeeded = False

        try:
            logger.info(
                f"Starting {kind.value} sync"
                + (f" (window: {window_minutes} min)" if window_minutes else "")
            )

            try:
                await self._preflight()

                since = started_at - timedelta(minutes=window_minutes) if window_minutes else None
                for entity_type in entity_types:
                    fetched, inserted = await self._sync_entity(entity_type, since, started_at)
                    fetched_counts[entity_type] = fetched
                    inserted_counts[entity_type] = inserted

                succeeded = True

            except ETLException as e:
                logger.error(
                    f"{kind.value} sync failed: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
                error_message = e.message

            except Exception as e:
                logger.exception(f"Unexpected error in {kind.value} sync")
                error_message = str(e)

            run = SyncRun(
                kind=kind,
                started_at=started_at,
                duration_seconds=round(time.monotonic() - clock_start, 3),
                per_entity_inserted_counts=inserted_counts,
                per_entity_fetched_counts=fetched_counts,
                succeeded=succeeded,
                window_minutes=window_minutes,
                error_message=error_message,
            )
            self.state.record(run)

            if succeeded:
                self.state.last_sync_at = datetime.utcnow()
            if run.total_inserted:
                invalidate_insights(self.cache_target)

            logger.info(
                f"{kind.value} sync finished in {run.duration_seconds}s: "
                f"{'succeeded' if succeeded else 'failed'}, "
                f"inserted {run.total_inserted} rows "
                f"({', '.join(f'{e.value}={n}' for e, n in inserted_counts.items())})"
            )
            return run

        finally:
            self.state.is_running = False

    async def _preflight(self) -> None:
        """Run-level checks: store reachable, warehouse schema provisioned once"""
        await ping_operational_store(self.db)

        if not self._schema_ready:
            await self.schema_manager.ensure_schema()
            self._schema_ready = True

    async def _sync_entity(
        self,
        entity_type: EntityType,
        since: Optional[datetime],
        now: datetime
    ) -> Tuple[int, int]:
        """Extract, transform and load one entity type; returns (fetched, inserted)"""
        source = self.sources[entity_type]
        fetched = 0

        try:
            records = await source.extract(since=since)
            fetched = len(records)

            rows = source.transform_all(records, now=now)
            result = await self.loader.insert_rows(source.table, rows)
            return fetched, result.inserted_count

        except PartialInsertError as e:
            logger.error(
                f"Partial insert for {entity_type.value}: {e.inserted_count} accepted, "
                f"{len(e.row_errors)} errors; counting entity as 0",
                extra={"error_context": e.to_dict()}
            )
            return fetched, 0

        except ETLException as e:
            logger.error(
                f"Sync failed for {entity_type.value}: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return fetched, 0

        except Exception:
            logger.exception(f"Unexpected error syncing {entity_type.value}")
            return fetched, 0
