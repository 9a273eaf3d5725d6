from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Date, DateTime, ForeignKey, JSON, Uuid, Index
from sqlalchemy.dialects.postgresql import JSONB
from streakzz.db import Base


class Project(Base):
    """A daily project submission. Append-only."""
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), index=True, nullable=False
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    live_link: Mapped[str] = mapped_column(String(500), nullable=False)
    github_link: Mapped[str] = mapped_column(String(500), nullable=False)
    technologies: Mapped[list[str]] = mapped_column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    submitted_on: Mapped[date] = mapped_column(Date, nullable=False)  # UTC day of created_at

    __table_args__ = (
        Index("ix_projects_user_submitted_on", "user_id", "submitted_on"),
    )
