from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Sequence
from uuid import UUID

import structlog
from sqlalchemy import select, func, update, exists
from sqlalchemy.ext.asyncio import AsyncSession

from streakzz.config import settings
from streakzz.models.project import Project
from streakzz.models.user import User
from streakzz.schemas.admin import CleanupResult, ParticipantRow, ParticipantStats

log = structlog.get_logger()

# ---------- reads ----------

async def active_participants(session: AsyncSession) -> list[User]:
    """Participants (not admins) that have not been soft-deleted."""
    return list((await session.execute(
        select(User)
        .where(User.role == "participant", User.is_deleted.is_(False))
        .order_by(User.created_at.asc())
    )).scalars().all())


async def project_counts(session: AsyncSession) -> dict[UUID, int]:
    """Lifetime project count per user id (users without projects are absent)."""
    rows = (await session.execute(
        select(Project.user_id, func.count(Project.id)).group_by(Project.user_id)
    )).all()
    return {uid: int(n) for (uid, n) in rows}


def _bucket_stats(participants: Sequence[User], counts: Mapping[UUID, int]) -> ParticipantStats:
    stats = ParticipantStats(total_participants=len(participants))
    for p in participants:
        n = counts.get(p.id, 0)
        if n == 0:
            stats.participants_with_zero_projects += 1
            continue
        stats.participants_with_projects += 1
        if n == 1:
            stats.participants_with_one_project += 1
        else:
            stats.participants_with_two_plus_projects += 1
    return stats


async def participant_stats(session: AsyncSession) -> ParticipantStats:
    participants = await active_participants(session)
    return _bucket_stats(participants, await project_counts(session))


async def participant_rows(session: AsyncSession) -> list[ParticipantRow]:
    """Admin listing. Streak figures come from the stored counters."""
    participants = await active_participants(session)
    counts = await project_counts(session)
    return [
        ParticipantRow(
            id=p.id,
            name=p.full_name,
            email=p.email,
            project_count=counts.get(p.id, 0),
            streak_count=p.current_streak,
            longest_streak=p.longest_streak,
            has_reached_thirty_projects=p.has_reached_thirty_projects,
            points=p.points,
            joined_at=p.created_at,
        ) for p in participants
    ]

# ---------- cleanup policy ----------

@dataclass
class CleanupPlan:
    to_delete: list[UUID] = field(default_factory=list)
    result: CleanupResult | None = None


def plan_cleanup(
    participants: Sequence[User],
    counts: Mapping[UUID, int],
    *,
    milestone: int | None = None,
) -> CleanupPlan:
    """
    Decide which active participants to soft-delete.

    Zero-project participants are removed only once somebody has 2+
    projects, and never once the engaged cohort has reached the milestone
    (everyone with projects at 30+, or anyone already flagged).
    """
    milestone = settings.milestone_projects if milestone is None else milestone
    if not participants:
        return CleanupPlan(result=CleanupResult(message="No participants found"))

    stats = _bucket_stats(participants, counts)
    zero = [p.id for p in participants if counts.get(p.id, 0) == 0]

    def skipped(reason, message) -> CleanupPlan:
        return CleanupPlan(result=CleanupResult(**stats.model_dump(), skipped_reason=reason, message=message))

    if stats.participants_with_two_plus_projects == 0:
        return skipped(
            "no_established_participants",
            "No participants with 2+ projects found. Skipping cleanup to preserve all accounts.",
        )

    with_projects = [p for p in participants if counts.get(p.id, 0) > 0]
    if all(counts[p.id] >= milestone for p in with_projects):
        return skipped(
            "all_reached_milestone",
            f"Cleanup skipped: All remaining participants have {milestone}+ project submissions.",
        )
    if any(p.has_reached_thirty_projects for p in participants):
        return skipped(
            "milestone_reached",
            f"Cleanup skipped: Some participants have reached the {milestone}-project milestone.",
        )

    result = CleanupResult(**stats.model_dump(), message="")
    return CleanupPlan(to_delete=zero, result=result)


async def cleanup_inactive_participants(session: AsyncSession) -> CleanupResult:
    participants = await active_participants(session)
    counts = await project_counts(session)
    plan = plan_cleanup(participants, counts)
    result = plan.result

    if result.skipped_reason or not participants:
        log.info("participant_cleanup_skipped", reason=result.skipped_reason, total=result.total_participants)
        return result

    deleted = 0
    if plan.to_delete:
        res = await session.execute(
            update(User)
            .where(
                User.id.in_(plan.to_delete),
                User.role == "participant",
                User.is_deleted.is_(False),
                # re-checked at write time: a first submission may have landed since the scan
                ~exists().where(Project.user_id == User.id),
            )
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        deleted = int(res.rowcount or 0)
        await session.commit()

    total_projects = sum(counts.values())
    result.deleted_users = deleted
    result.message = (
        f"Successfully deleted {deleted} inactive participant accounts. "
        f"{result.participants_with_two_plus_projects} participants have 2+ projects. "
        f"Total projects: {total_projects}."
    )
    log.info(
        "participant_cleanup",
        deleted=deleted,
        total=result.total_participants,
        zero=result.participants_with_zero_projects,
        two_plus=result.participants_with_two_plus_projects,
    )
    return result
