import asyncio
import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from core.cache import TTLCache, cache
from core.config import Settings, settings as default_settings
from ingestion.runner import SyncOrchestrator
from models.base import SyncKind

logger = logging.getLogger(__name__)


class SyncScheduler:
    """
    Fire the orchestrator on fixed cadences.

    Jobs are fire-and-forget: single-flight is enforced by the orchestrator,
    not here, and missed ticks are not caught up.
    """

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        config: Optional[Settings] = None,
        cache_target: Optional[TTLCache] = None
    ):
        self.orchestrator = orchestrator
        self.config = config or default_settings
        self.cache_target = cache_target if cache_target is not None else cache
        self.scheduler = AsyncIOScheduler(timezone=self.config.SCHEDULER_TIMEZONE)

    async def run_sync_job(self, kind: SyncKind):
        """Job to run one sync"""
        logger.info(f"Scheduler: Starting {kind.value} sync job")
        try:
            return await self.orchestrator.run(kind)
        except Exception as e:
            logger.error(f"Scheduler: {kind.value} sync job failed - {e}")
            return None

    def cleanup_cache_job(self) -> int:
        removed = self.cache_target.cleanup()
        if removed:
            logger.info(f"Scheduler: Removed {removed} expired cache entries")
        return removed

    def start(self):
        """Start the scheduler"""
        schedules = (
            (SyncKind.FULL, self.config.FULL_SYNC_CRON),
            (SyncKind.INCREMENTAL, self.config.INCREMENTAL_SYNC_CRON),
            (SyncKind.WEEKLY_AGGREGATE, self.config.WEEKLY_METRICS_CRON),
        )
        for kind, crontab in schedules:
            self.scheduler.add_job(
                self.run_sync_job,
                trigger=CronTrigger.from_crontab(crontab, timezone=self.config.SCHEDULER_TIMEZONE),
                args=[kind],
                id=f"{kind.value}_sync",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            logger.info(f"Scheduled {kind.value} sync: {crontab}")

        self.scheduler.add_job(
            self.cleanup_cache_job,
            trigger=IntervalTrigger(minutes=self.config.CACHE_CLEANUP_MINUTES),
            id="cache_cleanup",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info("Sync Scheduler started")

    def trigger(self, kind: SyncKind) -> None:
        """Queue a one-off run right away (manual trigger)"""
        self.scheduler.add_job(
            self.run_sync_job,
            args=[kind],
            id=f"manual_{kind.value}_sync",
            replace_existing=True,
        )
        logger.info(f"Manual {kind.value} sync queued")

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def get_jobs(self):
        return self.scheduler.get_jobs()

    async def stop(self):
        if self.running:
            self.scheduler.shutdown(wait=False)
            # AsyncIOScheduler finishes shutdown on the next loop iteration
            await asyncio.sleep(0)
        logger.info("Sync Scheduler stopped")
