"""
Shared fixtures: an in-memory stand-in for the async session factory and
builders for the raw rows the storage layer returns.
"""
from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


class FakeSessionFactory:
    """Callable like async_sessionmaker; every session is the same AsyncMock."""

    def __init__(self):
        self.session = AsyncMock()
        self.opened = 0

    def __call__(self):
        self.opened += 1
        return self

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def session_factory():
    return FakeSessionFactory()


def sleep_row(local_date, duration_mins, start="23:00", wake="07:00", row_id=1):
    return SimpleNamespace(
        id=row_id,
        local_date=date.fromisoformat(local_date),
        sleep_start_local=start,
        wake_time_local=wake,
        duration_mins=duration_mins,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


def mood_row(local_date, rating):
    return SimpleNamespace(local_date=date.fromisoformat(local_date), rating=rating)


def workout_row(local_date, running=False, calisthenics=False):
    return SimpleNamespace(
        local_date=date.fromisoformat(local_date),
        running_completed=running,
        calisthenics_completed=calisthenics,
    )


def habit(habit_id, name, weight=1):
    return SimpleNamespace(id=habit_id, name=name, weight=weight)


def habit_log(local_date, habit_id, completed=True, completed_at=None):
    return SimpleNamespace(
        local_date=date.fromisoformat(local_date),
        habit_id=habit_id,
        completed=completed,
        completed_at=completed_at,
    )
