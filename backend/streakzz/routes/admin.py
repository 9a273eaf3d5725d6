from __future__ import annotations
import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.auth_deps import require_admin, get_scheduler
from streakzz.db import get_session
from streakzz.schemas.admin import (
    CleanupResult, ParticipantRow, ParticipantStats, SchedulerAction, SchedulerStart, SchedulerStatus,
)
from streakzz.services.participants import cleanup_inactive_participants, participant_rows, participant_stats
from streakzz.services.scheduler import CleanupScheduler

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
log = structlog.get_logger()


@router.get("/participants", response_model=list[ParticipantRow])
async def list_participants(session: AsyncSession = Depends(get_session)):
    return await participant_rows(session)


@router.get("/stats", response_model=ParticipantStats)
async def stats(session: AsyncSession = Depends(get_session)):
    return await participant_stats(session)


@router.post("/cleanup", response_model=CleanupResult)
async def cleanup(session: AsyncSession = Depends(get_session)):
    try:
        return await cleanup_inactive_participants(session)
    except SQLAlchemyError:
        log.exception("participant_cleanup_failed")
        raise HTTPException(status_code=500, detail="Cleanup failed")


@router.get("/scheduler", response_model=SchedulerStatus)
async def scheduler_status(scheduler: CleanupScheduler = Depends(get_scheduler)):
    return scheduler.status()


@router.post("/scheduler/start", response_model=SchedulerAction)
async def scheduler_start(body: SchedulerStart | None = None, scheduler: CleanupScheduler = Depends(get_scheduler)):
    try:
        started = scheduler.start((body or SchedulerStart()).expression)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"Invalid cron expression: {e}")
    msg = "Scheduler started successfully" if started else "Scheduler is already running"
    return SchedulerAction(message=msg, status=scheduler.status())


@router.post("/scheduler/stop", response_model=SchedulerAction)
async def scheduler_stop(scheduler: CleanupScheduler = Depends(get_scheduler)):
    stopped = scheduler.stop()
    msg = "Scheduler stopped successfully" if stopped else "Scheduler is not running"
    return SchedulerAction(message=msg, status=scheduler.status())


@router.post("/scheduler/run", response_model=CleanupResult)
async def scheduler_run_now(scheduler: CleanupScheduler = Depends(get_scheduler)):
    try:
        return await scheduler.run_now()
    except SQLAlchemyError:
        log.exception("participant_cleanup_failed", source="manual")
        raise HTTPException(status_code=500, detail="Cleanup failed")
