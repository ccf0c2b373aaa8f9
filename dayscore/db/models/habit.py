from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base, utcnow


class Habit(Base):
    """Habit definition; its weight sets its share of the habits score."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_scope: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(128), index=True)
    weight: Mapped[int] = mapped_column(default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class HabitLog(Base):
    """Completion fact for a habit on one local date."""

    __table_args__ = (UniqueConstraint("user_scope", "habit_id", "local_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_scope: Mapped[str] = mapped_column(String(64), index=True)
    habit_id: Mapped[int] = mapped_column(ForeignKey("habit.id", ondelete="CASCADE"), index=True)
    local_date: Mapped[date] = mapped_column(index=True)
    completed: Mapped[bool] = mapped_column(default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
