"""
Tests for storage reads and upserts on an in-memory SQLite database.
"""
from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dayscore.db import repository
from dayscore.db.models import Habit, HabitLog, MoodLog, SleepLog
from dayscore.db.session import _build_async_engine, create_all


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await create_all(engine)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


async def count_rows(session_factory, model):
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model))


async def add_habits(session_factory, user_scope, *names):
    async with repository.transaction(session_factory) as session:
        habits = [Habit(user_scope=user_scope, name=name) for name in names]
        session.add_all(habits)
    return habits


@pytest.mark.asyncio
async def test_mood_upsert_keeps_one_row_per_day(db):
    async with repository.transaction(db) as session:
        first = await repository.upsert_mood_log(session, "athlete-7", date(2024, 3, 1), 2)
    async with repository.transaction(db) as session:
        second = await repository.upsert_mood_log(session, "athlete-7", date(2024, 3, 1), 5)

    assert second.id == first.id
    assert second.rating == 5
    assert await count_rows(db, MoodLog) == 1

    async with repository.transaction(db) as session:
        await repository.upsert_mood_log(session, "athlete-8", date(2024, 3, 1), 3)
    assert await count_rows(db, MoodLog) == 2


@pytest.mark.asyncio
async def test_sleep_upsert_replaces_the_night(db):
    for start, wake, duration in (("23:00", "07:00", 480), ("22:30", "06:00", 450)):
        async with repository.transaction(db) as session:
            await repository.upsert_sleep_log(
                session,
                "athlete-7",
                date(2024, 3, 1),
                sleep_start_local=start,
                wake_time_local=wake,
                sleep_start_ts=datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc),
                wake_ts=datetime(2024, 3, 1, 22, 0, tzinfo=timezone.utc),
                duration_mins=duration,
            )

    rows = await repository.run_read(db, repository.fetch_sleep_logs, "athlete-7", date(2024, 3, 1), date(2024, 3, 1))
    assert len(rows) == 1
    assert (rows[0].sleep_start_local, rows[0].wake_time_local, rows[0].duration_mins) == ("22:30", "06:00", 450)
    assert await count_rows(db, SleepLog) == 1


@pytest.mark.asyncio
async def test_range_reads_include_both_ends(db):
    async with repository.transaction(db) as session:
        for day, rating in ((date(2024, 2, 29), 1), (date(2024, 3, 1), 2), (date(2024, 3, 2), 3),
                            (date(2024, 3, 3), 4), (date(2024, 3, 4), 5)):
            await repository.upsert_mood_log(session, "athlete-7", day, rating)
        await repository.upsert_mood_log(session, "athlete-8", date(2024, 3, 2), 5)

    rows = await repository.run_read(db, repository.fetch_mood_logs, "athlete-7", date(2024, 3, 1), date(2024, 3, 3))

    assert [(row.local_date, row.rating) for row in rows] == [
        (date(2024, 3, 1), 2),
        (date(2024, 3, 2), 3),
        (date(2024, 3, 3), 4),
    ]


@pytest.mark.asyncio
async def test_habits_are_scoped_and_sorted(db):
    await add_habits(db, "athlete-7", "Stretch", "Read")
    await add_habits(db, "athlete-8", "Walk")

    habits = await repository.run_read(db, repository.fetch_habits, "athlete-7")
    assert [h.name for h in habits] == ["Read", "Stretch"]
    assert all(h.weight == 1 for h in habits)


@pytest.mark.asyncio
async def test_habit_log_upsert_per_habit_and_day(db):
    stretch, read = await add_habits(db, "athlete-7", "Stretch", "Read")
    done_at = datetime(2024, 3, 1, 7, 0, tzinfo=timezone.utc)

    async with repository.transaction(db) as session:
        await repository.upsert_habit_logs(session, "athlete-7", date(2024, 3, 1), [
            {"habit_id": read.id, "completed": True, "completed_at": done_at},
            {"habit_id": stretch.id, "completed": False, "completed_at": None},
        ])
    async with repository.transaction(db) as session:
        await repository.upsert_habit_logs(session, "athlete-7", date(2024, 3, 1), [
            {"habit_id": read.id, "completed": False, "completed_at": None},
        ])
    async with repository.transaction(db) as session:
        await repository.upsert_habit_logs(session, "athlete-7", date(2024, 3, 2), [
            {"habit_id": read.id, "completed": True, "completed_at": done_at},
        ])

    assert await count_rows(db, HabitLog) == 3

    logs = await repository.run_read(db, repository.fetch_habit_logs, "athlete-7", date(2024, 3, 1), date(2024, 3, 1))
    by_habit = {log.habit_id: log for log in logs}
    assert set(by_habit) == {read.id, stretch.id}
    assert by_habit[read.id].completed is False
    assert by_habit[read.id].completed_at is None
    assert by_habit[stretch.id].completed is False


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        async with repository.transaction(db) as session:
            await repository.upsert_mood_log(session, "athlete-7", date(2024, 3, 1), 4)
            raise RuntimeError("abort")

    assert await count_rows(db, MoodLog) == 0


def test_engine_uses_async_driver():
    engine = _build_async_engine("postgresql://tracker@localhost:5432/dayscore")
    assert engine.url.drivername == "postgresql+asyncpg"
    assert engine.url.database == "dayscore"
