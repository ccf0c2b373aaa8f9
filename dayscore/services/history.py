from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dayscore.db import repository
from dayscore.exceptions import DateRangeError
from dayscore.schemas.score import DateRange, HeatmapData, HistoricalScore
from dayscore.services.day_score import build_day_input, join_habits
from dayscore.services.scoring import day_score
from dayscore.utils.timezone_utils import LocalDateLike, date_range, parse_local_date

logger = logging.getLogger(__name__)


def _key(row: Any) -> str:
    return parse_local_date(row.local_date).isoformat()


def aggregate_history(
    start: LocalDateLike,
    end: LocalDateLike,
    sleep_rows: Iterable[Any],
    habits: Iterable[Any],
    habit_logs: Iterable[Any],
    mood_rows: Iterable[Any],
    workout_rows: Iterable[Any],
) -> HeatmapData:
    """
    Build one HistoricalScore per calendar day in [start, end].

    Rows are joined to days by local date. A day with no sleep, mood or
    workout row and no habit completion has ``has_data=False`` and scores 0.

    Raises:
        DateRangeError: start is after end
    """
    start_date = parse_local_date(start)
    end_date = parse_local_date(end)
    if start_date > end_date:
        raise DateRangeError("Start date must be before or equal to end date")

    sleep_by_day = {_key(row): row for row in sleep_rows}
    mood_by_day = {_key(row): row for row in mood_rows}
    workout_by_day = {_key(row): row for row in workout_rows}
    habit_logs_by_day: Dict[str, List[Any]] = defaultdict(list)
    for log in habit_logs:
        habit_logs_by_day[_key(log)].append(log)
    habits = list(habits)

    scores: List[HistoricalScore] = []
    max_score = 0

    for day in date_range(start_date, end_date):
        day_key = day.isoformat()
        sleep_row = sleep_by_day.get(day_key)
        mood_row = mood_by_day.get(day_key)
        workout_row = workout_by_day.get(day_key)
        day_logs = habit_logs_by_day.get(day_key, [])

        has_data = any(row is not None for row in (sleep_row, mood_row, workout_row)) or bool(day_logs)
        if not has_data:
            scores.append(HistoricalScore(local_date=day_key))
            continue

        result = day_score(build_day_input(sleep_row, join_habits(habits, day_logs), mood_row, workout_row))
        scores.append(
            HistoricalScore(
                local_date=day_key,
                total_score=result.total,
                breakdown=result.breakdown,
                has_data=True,
            )
        )
        max_score = max(max_score, result.total)

    return HeatmapData(
        scores=scores,
        date_range=DateRange(start=start_date.isoformat(), end=end_date.isoformat()),
        # Empty ranges scale against 100
        max_score=max_score or 100,
    )


async def historical_scores(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    start: LocalDateLike,
    end: LocalDateLike,
) -> HeatmapData:
    """Fetch every domain for the whole range concurrently, then score each day."""
    start_date = parse_local_date(start)
    end_date = parse_local_date(end)
    if start_date > end_date:
        raise DateRangeError("Start date must be before or equal to end date")

    sleep_rows, habits, habit_logs, mood_rows, workout_rows = await asyncio.gather(
        repository.run_read(session_factory, repository.fetch_sleep_logs, user_scope, start_date, end_date),
        repository.run_read(session_factory, repository.fetch_habits, user_scope),
        repository.run_read(session_factory, repository.fetch_habit_logs, user_scope, start_date, end_date),
        repository.run_read(session_factory, repository.fetch_mood_logs, user_scope, start_date, end_date),
        repository.run_read(session_factory, repository.fetch_workout_logs, user_scope, start_date, end_date),
    )
    logger.debug(
        f"History {start_date}..{end_date} for {user_scope}: "
        f"{len(sleep_rows)} sleep, {len(habit_logs)} habit, {len(mood_rows)} mood, {len(workout_rows)} workout rows"
    )

    return aggregate_history(start_date, end_date, sleep_rows, habits, habit_logs, mood_rows, workout_rows)
