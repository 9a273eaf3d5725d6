from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable

from streakzz.services.time_windows import utc_day, days_between

MILESTONE_PROJECTS = 30
POINTS_PER_STREAK_DAY = 10


@dataclass(frozen=True)
class StreakState:
    """
    Snapshot of a participant's streak accumulator.

    Invariants maintained by `advance`:
      - longest_streak never decreases
      - points never decrease (a reset after a gap claws nothing back)
      - once has_reached_thirty_projects is set, current/longest streak and
        points stop changing
    """
    current_streak: int = 0
    longest_streak: int = 0
    last_submission_date: date | None = None
    first_submission_date: date | None = None
    has_reached_thirty_projects: bool = False
    points: int = 0

    @classmethod
    def from_user(cls, user) -> "StreakState":
        return cls(
            current_streak=int(user.current_streak or 0),
            longest_streak=int(user.longest_streak or 0),
            last_submission_date=user.last_submission_date,
            first_submission_date=user.first_submission_date,
            has_reached_thirty_projects=bool(user.has_reached_thirty_projects),
            points=int(user.points or 0),
        )

    def apply_to(self, user) -> None:
        user.current_streak = self.current_streak
        user.longest_streak = self.longest_streak
        user.last_submission_date = self.last_submission_date
        user.first_submission_date = self.first_submission_date
        user.has_reached_thirty_projects = self.has_reached_thirty_projects
        user.points = self.points

    def is_backdated(self, today: date | datetime) -> bool:
        """True if `today` falls before the last recorded submission day."""
        last = self.last_submission_date
        return last is not None and utc_day(today) < last


def advance(
    state: StreakState,
    today: date | datetime,
    lifetime_count: int,
    *,
    milestone: int = MILESTONE_PROJECTS,
    points_per_day: int = POINTS_PER_STREAK_DAY,
) -> StreakState:
    """
    Apply one accepted submission made on `today` to `state`.

    `lifetime_count` is the participant's total number of submissions,
    including this one. The milestone flag it may set only freezes the
    streak from the next submission on.

    A submission dated before `last_submission_date` leaves streak, points
    and last date untouched; only the milestone flag is re-evaluated.
    """
    if today is None:
        raise TypeError("today is required")
    day = utc_day(today)
    new = state

    if state.has_reached_thirty_projects:
        if state.last_submission_date is None or day > state.last_submission_date:
            new = replace(new, last_submission_date=day)
        return new

    last = state.last_submission_date
    if state.first_submission_date is None:
        new = replace(
            new,
            first_submission_date=day,
            current_streak=1,
            longest_streak=max(state.longest_streak, 1),
            points=max(state.points, points_per_day),
            last_submission_date=day,
        )
    elif last is None:
        # first date known but no last date: start over
        new = replace(
            new,
            current_streak=1,
            longest_streak=max(state.longest_streak, 1),
            points=max(state.points, points_per_day),
            last_submission_date=day,
        )
    else:
        gap = days_between(last, day)
        if gap == 1:
            current = state.current_streak + 1
            new = replace(
                new,
                current_streak=current,
                longest_streak=max(state.longest_streak, current),
                points=state.points + points_per_day,
                last_submission_date=day,
            )
        elif gap > 1:
            new = replace(new, current_streak=1, last_submission_date=day)
        # gap == 0: same day; gap < 0: backdated, ignored

    if lifetime_count >= milestone and not new.has_reached_thirty_projects:
        new = replace(new, has_reached_thirty_projects=True)
    return new


def replay(
    days: Iterable[date | datetime],
    *,
    milestone: int = MILESTONE_PROJECTS,
    points_per_day: int = POINTS_PER_STREAK_DAY,
) -> StreakState:
    """
    Rebuild a participant's accumulator from their full submission history.

    Used by the repair job only; the live path trusts the stored counters.
    """
    state = StreakState()
    for count, day in enumerate(sorted(utc_day(d) for d in days), start=1):
        state = advance(state, day, count, milestone=milestone, points_per_day=points_per_day)
    return state
