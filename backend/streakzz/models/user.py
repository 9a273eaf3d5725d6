from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Date, DateTime, Uuid, CheckConstraint, func
from streakzz.db import Base


class User(Base):
    """
    Registered account. Participants also carry the streak accumulator,
    maintained incrementally on every accepted project submission.

    Soft delete only: `is_deleted` rows keep their projects.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="participant")  # participant|admin
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    # Streak accumulator (dates are UTC calendar days)
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_submission_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    first_submission_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    has_reached_thirty_projects: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("current_streak >= 0", name="ck_users_current_streak_nonneg"),
        CheckConstraint("longest_streak >= current_streak", name="ck_users_longest_ge_current"),
        CheckConstraint("points >= 0", name="ck_users_points_nonneg"),
        CheckConstraint("role IN ('participant', 'admin')", name="ck_users_role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
