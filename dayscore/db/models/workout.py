from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base, utcnow


class WorkoutLog(Base):
    """Workout flags for one local date."""

    __table_args__ = (UniqueConstraint("user_scope", "local_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_scope: Mapped[str] = mapped_column(String(64), index=True)
    local_date: Mapped[date] = mapped_column(index=True)
    running_completed: Mapped[bool] = mapped_column(default=False)
    calisthenics_completed: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
