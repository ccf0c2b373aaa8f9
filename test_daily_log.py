"""
Tests for the validated write commands.
"""
from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from conftest import habit, habit_log, mood_row, sleep_row, workout_row
from dayscore.exceptions import InputValidationError
from dayscore.services.daily_log import record_habit_completions, record_mood, record_sleep, record_workout


@pytest.mark.asyncio
async def test_record_sleep_across_midnight(session_factory):
    stored = sleep_row("2024-03-01", 480)
    with patch("dayscore.db.repository.upsert_sleep_log", AsyncMock(return_value=stored)) as upsert:
        result = await record_sleep(session_factory, "athlete-7", "2024-03-01", "23:00", "07:00")

    upsert.assert_awaited_once_with(
        session_factory.session,
        "athlete-7",
        date(2024, 3, 1),
        sleep_start_local="23:00",
        wake_time_local="07:00",
        sleep_start_ts=datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc),
        wake_ts=datetime(2024, 3, 1, 23, 0, tzinfo=timezone.utc),
        duration_mins=480,
    )
    session_factory.session.commit.assert_awaited_once()
    assert result.duration_mins == 480
    assert result.score == 100
    assert result.duration_label == "8h"


@pytest.mark.asyncio
async def test_record_sleep_rejects_before_writing(session_factory):
    with patch("dayscore.db.repository.upsert_sleep_log", AsyncMock()) as upsert:
        with pytest.raises(InputValidationError, match="at least 1 hour"):
            await record_sleep(session_factory, "athlete-7", "2024-03-01", "07:00", "07:30")

    upsert.assert_not_awaited()
    assert session_factory.opened == 0


@pytest.mark.asyncio
async def test_record_mood(session_factory):
    with patch("dayscore.db.repository.upsert_mood_log", AsyncMock(return_value=mood_row("2024-03-01", 4))) as upsert:
        result = await record_mood(session_factory, "athlete-7", "2024-03-01", 4)

    upsert.assert_awaited_once_with(session_factory.session, "athlete-7", date(2024, 3, 1), 4)
    assert result.model_dump() == {"rating": 4, "score": 75, "has_data": True}


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, 3.5, "4"])
async def test_record_mood_rejects(session_factory, rating):
    with patch("dayscore.db.repository.upsert_mood_log", AsyncMock()) as upsert:
        with pytest.raises(InputValidationError):
            await record_mood(session_factory, "athlete-7", "2024-03-01", rating)

    upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_mood_rejects_malformed_date(session_factory):
    with pytest.raises(InputValidationError, match="YYYY-MM-DD"):
        await record_mood(session_factory, "athlete-7", "03/01/2024", 3)


@pytest.mark.asyncio
async def test_record_habit_completions(session_factory):
    completions = [{"habit_id": 1, "completed": True}, SimpleNamespace(habit_id=2, completed=False)]
    with patch("dayscore.db.repository.upsert_habit_logs", AsyncMock(return_value=[])) as upsert, \
         patch("dayscore.db.repository.fetch_habits", AsyncMock(return_value=[habit(1, "Read"), habit(2, "Stretch")])), \
         patch("dayscore.db.repository.fetch_habit_logs",
               AsyncMock(return_value=[habit_log("2024-03-01", 1), habit_log("2024-03-01", 2, completed=False)])):
        result = await record_habit_completions(session_factory, "athlete-7", "2024-03-01", completions)

    session, scope, day, entries = upsert.await_args.args
    assert (scope, day) == ("athlete-7", date(2024, 3, 1))
    assert [(e["habit_id"], e["completed"]) for e in entries] == [(1, True), (2, False)]
    assert entries[0]["completed_at"] is not None
    assert entries[1]["completed_at"] is None

    assert result.score == 50
    assert result.total_weight == 2
    assert result.completed_weight == 1


@pytest.mark.asyncio
async def test_record_habit_completions_rejects(session_factory):
    with patch("dayscore.db.repository.upsert_habit_logs", AsyncMock()) as upsert:
        with pytest.raises(InputValidationError, match="positive integer"):
            await record_habit_completions(session_factory, "athlete-7", "2024-03-01", [{"habit_id": 0, "completed": True}])

    upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_habit_completions_rejects_foreign_habit(session_factory):
    completions = [{"habit_id": 1, "completed": True}, {"habit_id": 99, "completed": True}]
    with patch("dayscore.db.repository.upsert_habit_logs", AsyncMock()) as upsert, \
         patch("dayscore.db.repository.fetch_habits", AsyncMock(return_value=[habit(1, "Read")])) as fetch:
        with pytest.raises(InputValidationError, match="Invalid habit IDs: 99"):
            await record_habit_completions(session_factory, "athlete-7", "2024-03-01", completions)

    fetch.assert_awaited_once_with(session_factory.session, "athlete-7")
    upsert.assert_not_awaited()
    session_factory.session.rollback.assert_awaited_once()
    session_factory.session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_record_workout(session_factory):
    stored = workout_row("2024-03-01", running=True)
    with patch("dayscore.db.repository.upsert_workout_log", AsyncMock(return_value=stored)) as upsert:
        result = await record_workout(session_factory, "athlete-7", "2024-03-01", True, False)

    upsert.assert_awaited_once_with(
        session_factory.session,
        "athlete-7",
        date(2024, 3, 1),
        running_completed=True,
        calisthenics_completed=False,
    )
    assert result.score == 100
    assert result.has_data


@pytest.mark.asyncio
async def test_record_workout_rejects(session_factory):
    with patch("dayscore.db.repository.upsert_workout_log", AsyncMock()) as upsert:
        with pytest.raises(InputValidationError, match="Running"):
            await record_workout(session_factory, "athlete-7", "2024-03-01", "yes", False)

    upsert.assert_not_awaited()


@pytest.mark.asyncio
async def test_failed_write_rolls_back(session_factory):
    with patch("dayscore.db.repository.upsert_mood_log", AsyncMock(side_effect=RuntimeError("db down"))):
        with pytest.raises(RuntimeError, match="db down"):
            await record_mood(session_factory, "athlete-7", "2024-03-01", 3)

    session_factory.session.rollback.assert_awaited_once()
    session_factory.session.commit.assert_not_awaited()
