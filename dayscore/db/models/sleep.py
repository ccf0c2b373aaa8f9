from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base, utcnow


class SleepLog(Base):
    """One sleep session per local date; the date is the night the sleep started."""

    __table_args__ = (UniqueConstraint("user_scope", "local_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_scope: Mapped[str] = mapped_column(String(64), index=True)
    local_date: Mapped[date] = mapped_column(index=True)
    sleep_start_local: Mapped[str] = mapped_column(String(5))  # HH:MM
    wake_time_local: Mapped[str] = mapped_column(String(5))  # HH:MM
    sleep_start_ts: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    wake_ts: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    duration_mins: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
