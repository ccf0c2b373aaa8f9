from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dayscore.db import repository
from dayscore.schemas.daily_log import (
    DashboardData,
    HabitsSummary,
    MoodSummary,
    SleepSummary,
    WorkoutSummary,
)
from dayscore.schemas.score import DayScore, DayScoreInput, HabitWithCompletion
from dayscore.services.scoring import day_score, habits_score, mood_score, sleep_score, workout_score
from dayscore.utils.timezone_utils import LocalDateLike, format_duration, parse_local_date

logger = logging.getLogger(__name__)


def join_habits(habits: Iterable[Any], habit_logs: Iterable[Any]) -> List[HabitWithCompletion]:
    """
    Attach one day's completion rows to the habit definitions.

    A habit without a completion row counts as not completed; a habit
    without a weight counts with weight 1.
    """
    logs_by_habit = {log.habit_id: log for log in habit_logs}
    joined = []
    for habit in habits:
        log = logs_by_habit.get(habit.id)
        joined.append(
            HabitWithCompletion(
                id=habit.id,
                name=habit.name,
                weight=habit.weight or 1,
                completed=bool(log.completed) if log is not None else False,
                completed_at=log.completed_at if log is not None else None,
            )
        )
    return joined


def build_day_input(
    sleep_row: Optional[Any],
    habits: List[HabitWithCompletion],
    mood_row: Optional[Any],
    workout_row: Optional[Any],
) -> DayScoreInput:
    """Turn one day's raw rows into scorer input; missing rows leave their domain unset."""
    return DayScoreInput(
        sleep_duration_mins=sleep_row.duration_mins if sleep_row is not None else None,
        habits=habits or None,
        mood_rating=mood_row.rating if mood_row is not None else None,
        running_completed=workout_row.running_completed if workout_row is not None else None,
        calisthenics_completed=workout_row.calisthenics_completed if workout_row is not None else None,
    )


async def _fetch_day(
    session_factory: async_sessionmaker[AsyncSession], user_scope: str, local_date: LocalDateLike
) -> tuple:
    day = parse_local_date(local_date)
    sleep_rows, habits, habit_logs, mood_rows, workout_rows = await asyncio.gather(
        repository.run_read(session_factory, repository.fetch_sleep_logs, user_scope, day, day),
        repository.run_read(session_factory, repository.fetch_habits, user_scope),
        repository.run_read(session_factory, repository.fetch_habit_logs, user_scope, day, day),
        repository.run_read(session_factory, repository.fetch_mood_logs, user_scope, day, day),
        repository.run_read(session_factory, repository.fetch_workout_logs, user_scope, day, day),
    )
    return (
        sleep_rows[0] if sleep_rows else None,
        join_habits(habits, habit_logs),
        mood_rows[0] if mood_rows else None,
        workout_rows[0] if workout_rows else None,
    )


async def get_day_score(
    session_factory: async_sessionmaker[AsyncSession], user_scope: str, local_date: LocalDateLike
) -> DayScore:
    """Fetch one day's logs concurrently and compute its score, breakdown and tips."""
    sleep_row, habits, mood_row, workout_row = await _fetch_day(session_factory, user_scope, local_date)
    result = day_score(build_day_input(sleep_row, habits, mood_row, workout_row))
    logger.debug(f"Day score for {user_scope} on {local_date}: {result.total}")
    return result


def summarize_sleep(row: Optional[Any]) -> Optional[SleepSummary]:
    if row is None:
        return None
    return SleepSummary(
        id=row.id,
        local_date=parse_local_date(row.local_date).isoformat(),
        sleep_start_local=row.sleep_start_local,
        wake_time_local=row.wake_time_local,
        duration_mins=row.duration_mins,
        duration_label=format_duration(row.duration_mins),
        score=sleep_score(row.duration_mins),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def summarize_habits(habits: List[HabitWithCompletion]) -> HabitsSummary:
    return HabitsSummary(
        habits=habits,
        score=habits_score(habits),
        total_weight=sum(h.weight for h in habits),
        completed_weight=sum(h.weight for h in habits if h.completed),
    )


def summarize_mood(row: Optional[Any]) -> MoodSummary:
    if row is None:
        return MoodSummary()
    return MoodSummary(rating=row.rating, score=mood_score(row.rating), has_data=True)


def summarize_workout(row: Optional[Any]) -> WorkoutSummary:
    if row is None:
        return WorkoutSummary()
    return WorkoutSummary(
        running_completed=bool(row.running_completed),
        calisthenics_completed=bool(row.calisthenics_completed),
        score=workout_score(row.running_completed, row.calisthenics_completed),
        has_data=True,
    )


async def get_dashboard_data(
    session_factory: async_sessionmaker[AsyncSession], user_scope: str, local_date: LocalDateLike
) -> DashboardData:
    """Per-domain summaries of one day, each with its own component score."""
    sleep_row, habits, mood_row, workout_row = await _fetch_day(session_factory, user_scope, local_date)
    return DashboardData(
        local_date=parse_local_date(local_date).isoformat(),
        sleep=summarize_sleep(sleep_row),
        habits=summarize_habits(habits),
        mood=summarize_mood(mood_row),
        workouts=summarize_workout(workout_row),
    )
