"""
Write commands for the four daily logs.

Each command validates its input before touching storage; an
InputValidationError aborts the write and reaches the caller unchanged.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dayscore.db import repository
from dayscore.exceptions import InputValidationError
from dayscore.schemas.daily_log import HabitsSummary, MoodSummary, SleepSummary, WorkoutSummary
from dayscore.services.day_score import (
    join_habits,
    summarize_habits,
    summarize_mood,
    summarize_sleep,
    summarize_workout,
)
from dayscore.services.scoring import (
    field_value,
    validate_habit_completions,
    validate_mood_rating,
    validate_sleep_times,
    validate_workout_completion,
)
from dayscore.utils.timezone_utils import LocalDateLike, duration_minutes, overnight_window, parse_local_date

logger = logging.getLogger(__name__)


def _validated(kind: str, validate: Callable[..., None], *args: Any) -> None:
    try:
        validate(*args)
    except InputValidationError as e:
        logger.warning(f"Rejected {kind} log: {e}")
        raise


async def record_sleep(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    local_date: LocalDateLike,
    sleep_start_local: str,
    wake_time_local: str,
) -> SleepSummary:
    """Create or replace the sleep session that started on ``local_date``."""
    day = parse_local_date(local_date)
    _validated("sleep", validate_sleep_times, sleep_start_local, wake_time_local, day)

    sleep_start_ts, wake_ts = overnight_window(sleep_start_local, wake_time_local, day)

    async with repository.transaction(session_factory) as session:
        row = await repository.upsert_sleep_log(
            session,
            user_scope,
            day,
            sleep_start_local=sleep_start_local,
            wake_time_local=wake_time_local,
            sleep_start_ts=sleep_start_ts,
            wake_ts=wake_ts,
            duration_mins=duration_minutes(sleep_start_local, wake_time_local, day),
        )
        return summarize_sleep(row)


async def record_mood(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    local_date: LocalDateLike,
    rating: int,
) -> MoodSummary:
    day = parse_local_date(local_date)
    _validated("mood", validate_mood_rating, rating)

    async with repository.transaction(session_factory) as session:
        row = await repository.upsert_mood_log(session, user_scope, day, int(rating))
        return summarize_mood(row)


async def record_habit_completions(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    local_date: LocalDateLike,
    habit_completions: Sequence[Any],
) -> HabitsSummary:
    """
    Store completion flags for several habits on one date.

    Returns the day's full habit summary, including habits not mentioned
    in ``habit_completions``. Every habit id must belong to ``user_scope``;
    otherwise nothing is written.
    """
    day = parse_local_date(local_date)
    _validated("habit", validate_habit_completions, habit_completions)

    now = datetime.now(timezone.utc)
    entries = [
        {
            "habit_id": field_value(completion, "habit_id"),
            "completed": field_value(completion, "completed"),
            "completed_at": now if field_value(completion, "completed") else None,
        }
        for completion in habit_completions
    ]

    async with repository.transaction(session_factory) as session:
        habits = await repository.fetch_habits(session, user_scope)
        known_ids = {habit.id for habit in habits}
        unknown_ids = [entry["habit_id"] for entry in entries if entry["habit_id"] not in known_ids]
        if unknown_ids:
            logger.warning(f"Rejected habit log for {user_scope}: unknown habit ids {unknown_ids}")
            raise InputValidationError(f"Invalid habit IDs: {', '.join(str(i) for i in unknown_ids)}")

        await repository.upsert_habit_logs(session, user_scope, day, entries)
        habit_logs = await repository.fetch_habit_logs(session, user_scope, day, day)
        return summarize_habits(join_habits(habits, habit_logs))


async def record_workout(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    local_date: LocalDateLike,
    running_completed: bool,
    calisthenics_completed: bool,
) -> WorkoutSummary:
    day = parse_local_date(local_date)
    _validated("workout", validate_workout_completion, running_completed, calisthenics_completed)

    async with repository.transaction(session_factory) as session:
        row = await repository.upsert_workout_log(
            session,
            user_scope,
            day,
            running_completed=running_completed,
            calisthenics_completed=calisthenics_completed,
        )
        return summarize_workout(row)
