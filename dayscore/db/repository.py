"""
Storage reads and upserts for the daily logs.

Every function works on a caller-provided AsyncSession; callers that need
several reads at once open one session per read.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Sequence, Type, TypeVar

from sqlalchemy import and_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dayscore.db.base import Base, utcnow
from dayscore.db.models import Habit, HabitLog, MoodLog, SleepLog, WorkoutLog

ModelT = TypeVar("ModelT", bound=Base)
ReadT = TypeVar("ReadT")

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def _fetch_range(
    session: AsyncSession, model: Type[ModelT], user_scope: str, start: date, end: date
) -> List[ModelT]:
    result = await session.execute(
        select(model)
        .where(
            and_(
                model.user_scope == user_scope,
                model.local_date >= start,
                model.local_date <= end,
            )
        )
        .order_by(model.local_date)
    )
    return list(result.scalars().all())


async def fetch_habits(session: AsyncSession, user_scope: str) -> List[Habit]:
    """All habit definitions of the scope, ordered by name."""
    result = await session.execute(
        select(Habit).where(Habit.user_scope == user_scope).order_by(Habit.name)
    )
    return list(result.scalars().all())


async def fetch_sleep_logs(session: AsyncSession, user_scope: str, start: date, end: date) -> List[SleepLog]:
    return await _fetch_range(session, SleepLog, user_scope, start, end)


async def fetch_habit_logs(session: AsyncSession, user_scope: str, start: date, end: date) -> List[HabitLog]:
    return await _fetch_range(session, HabitLog, user_scope, start, end)


async def fetch_mood_logs(session: AsyncSession, user_scope: str, start: date, end: date) -> List[MoodLog]:
    return await _fetch_range(session, MoodLog, user_scope, start, end)


async def fetch_workout_logs(session: AsyncSession, user_scope: str, start: date, end: date) -> List[WorkoutLog]:
    return await _fetch_range(session, WorkoutLog, user_scope, start, end)


async def _upsert(session: AsyncSession, model: Type[ModelT], keys: Dict[str, Any], values: Dict[str, Any]) -> ModelT:
    """
    INSERT ... ON CONFLICT (keys) DO UPDATE in one statement; does not commit.

    ``keys`` must name the columns of the model's unique constraint.
    """
    dialect = session.bind.dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upsert is not supported on {dialect}")

    stmt = insert(model).values(**keys, **values)
    set_ = {name: stmt.excluded[name] for name in values}
    if "updated_at" in model.__table__.c:
        set_["updated_at"] = utcnow()
    stmt = stmt.on_conflict_do_update(index_elements=list(keys), set_=set_).returning(model)

    result = await session.execute(stmt, execution_options={"populate_existing": True})
    return result.scalar_one()


async def upsert_sleep_log(session: AsyncSession, user_scope: str, local_date: date, **values: Any) -> SleepLog:
    return await _upsert(session, SleepLog, {"user_scope": user_scope, "local_date": local_date}, values)


async def upsert_mood_log(session: AsyncSession, user_scope: str, local_date: date, rating: int) -> MoodLog:
    return await _upsert(session, MoodLog, {"user_scope": user_scope, "local_date": local_date}, {"rating": rating})


async def upsert_workout_log(session: AsyncSession, user_scope: str, local_date: date, **values: Any) -> WorkoutLog:
    return await _upsert(session, WorkoutLog, {"user_scope": user_scope, "local_date": local_date}, values)


async def upsert_habit_logs(
    session: AsyncSession, user_scope: str, local_date: date, entries: Sequence[Dict[str, Any]]
) -> List[HabitLog]:
    """Upsert one completion row per entry; each entry carries ``habit_id`` plus column values."""
    rows = []
    for entry in entries:
        values = dict(entry)
        habit_id = values.pop("habit_id")
        rows.append(
            await _upsert(
                session,
                HabitLog,
                {"user_scope": user_scope, "habit_id": habit_id, "local_date": local_date},
                values,
            )
        )
    return rows


async def run_read(
    session_factory: async_sessionmaker[AsyncSession],
    fetch: Callable[..., Awaitable[ReadT]],
    *args: Any,
) -> ReadT:
    """Run one read in its own session so several reads can be gathered concurrently."""
    async with session_factory() as session:
        return await fetch(session, *args)


@asynccontextmanager
async def transaction(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Session that commits on success and rolls back on any error."""
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
