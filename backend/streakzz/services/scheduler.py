from __future__ import annotations
from typing import Awaitable, Callable

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from streakzz.schemas.admin import CleanupResult, SchedulerStatus

log = structlog.get_logger()

CleanupRunner = Callable[[], Awaitable[CleanupResult]]

JOB_ID = "participant_cleanup"


class CleanupScheduler:
    """
    Owns the recurring participant cleanup job.

    One instance per application (kept on app.state). Only one recurring job
    may be active: start() while running and stop() while idle are no-ops.
    """

    def __init__(self, runner: CleanupRunner, *, default_expression: str = "59 23 * * *", timezone: str = "UTC"):
        self._runner = runner
        self._default_expression = default_expression
        self._timezone = timezone
        self._scheduler: AsyncIOScheduler | None = None
        self._expression: str | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def start(self, expression: str | None = None) -> bool:
        """Start the cron job. Returns False if already running. Bad crontab -> ValueError."""
        if self._scheduler is not None:
            log.warning("cleanup_scheduler_already_running", expression=self._expression)
            return False
        expression = (expression or self._default_expression).strip()
        trigger = CronTrigger.from_crontab(expression, timezone=self._timezone)

        scheduler = AsyncIOScheduler(timezone=self._timezone)
        scheduler.add_job(
            self._tick,
            trigger,
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        scheduler.start()
        self._scheduler = scheduler
        self._expression = expression
        log.info("cleanup_scheduler_started", expression=expression, timezone=self._timezone)
        return True

    def stop(self) -> bool:
        if self._scheduler is None:
            return False
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self._expression = None
        log.info("cleanup_scheduler_stopped")
        return True

    def status(self) -> SchedulerStatus:
        if self._scheduler is None:
            return SchedulerStatus(running=False)
        job = self._scheduler.get_job(JOB_ID)
        return SchedulerStatus(
            running=True,
            expression=self._expression,
            timezone=self._timezone,
            next_run_at=getattr(job, "next_run_time", None),
        )

    async def run_now(self) -> CleanupResult:
        log.info("cleanup_manual_run")
        result = await self._runner()
        log.info("cleanup_manual_run_done", message=result.message, deleted=result.deleted_users)
        return result

    async def _tick(self) -> None:
        log.info("cleanup_scheduled_run")
        try:
            result = await self._runner()
        except Exception:
            # keep the schedule alive; next tick retries
            log.exception("cleanup_scheduled_run_failed")
            return
        log.info("cleanup_scheduled_run_done", message=result.message, deleted=result.deleted_users)
