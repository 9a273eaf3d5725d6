from __future__ import annotations
import asyncio
import argparse
from collections import defaultdict
from dataclasses import replace
from datetime import date
from uuid import UUID

import structlog
from sqlalchemy import select

from streakzz.config import settings
from streakzz.db import SessionLocal
from streakzz.models.project import Project
from streakzz.models.user import User
from streakzz.services.streak import StreakState, replay

log = structlog.get_logger()

# Repair / migration only. Rebuilds each participant's counters by replaying
# their submission days through the accumulator; the request path never does this.

async def run_rebuild(apply: bool = False) -> dict:
    async with SessionLocal() as session:
        users = (await session.execute(select(User).where(User.role == "participant", User.is_deleted.is_(False)))).scalars().all()
        rows = (await session.execute(select(Project.user_id, Project.submitted_on))).all()
        days: dict[UUID, list[date]] = defaultdict(list)
        for uid, d in rows:
            days[uid].append(d)

        drifted = 0
        for u in users:
            rebuilt = replay(
                days.get(u.id, []),
                milestone=settings.milestone_projects,
                points_per_day=settings.points_per_streak_day,
            )
            stored = StreakState.from_user(u)
            # never lower points already granted
            rebuilt = replace(rebuilt, points=max(stored.points, rebuilt.points))
            if rebuilt == stored:
                continue
            drifted += 1
            log.info(
                "streak_drift",
                user_id=str(u.id),
                stored_streak=stored.current_streak,
                rebuilt_streak=rebuilt.current_streak,
                stored_points=stored.points,
                rebuilt_points=rebuilt.points,
            )
            if apply:
                rebuilt.apply_to(u)
        if apply:
            await session.commit()
        summary = {"participants": len(users), "drifted": drifted, "applied": apply}
        log.info("streak_rebuild_done", **summary)
        return summary

def rebuild_streaks(apply: bool = False) -> dict:
    return asyncio.run(run_rebuild(apply))

if __name__ == "__main__":
    from streakzz.logging_setup import configure_logging
    configure_logging()
    parser = argparse.ArgumentParser(description="Recompute streak counters from project history")
    parser.add_argument("--apply", action="store_true", help="write rebuilt counters (default: report only)")
    args = parser.parse_args()
    rebuild_streaks(apply=args.apply)
