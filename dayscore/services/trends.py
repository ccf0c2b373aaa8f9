from __future__ import annotations

import logging
from datetime import timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dayscore.config import settings
from dayscore.exceptions import InputValidationError
from dayscore.schemas.score import HistoricalScore, TrendData, TrendDataPoint
from dayscore.services.history import historical_scores
from dayscore.utils.rounding import round_half_up
from dayscore.utils.timezone_utils import parse_local_date, today

logger = logging.getLogger(__name__)

MIN_TREND_DAYS = 7
MAX_TREND_DAYS = 365

# SVG viewBox the coordinates are projected onto
CHART_WIDTH = 400
CHART_HEIGHT = 120
CHART_PADDING = 20


class TrendComponent(str, Enum):
    total = "total"
    sleep = "sleep"
    habits = "habits"
    mood = "mood"
    workouts = "workouts"


def _component_value(score: HistoricalScore, component: TrendComponent) -> int:
    if component is TrendComponent.total:
        return score.total_score
    return getattr(score.breakdown, component.value)


def linear_trend(values: List[float]) -> float:
    """Least-squares slope of value against 0-based index; 0 for fewer than two values."""
    n = len(values)
    if n <= 1:
        return 0.0

    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for index, value in enumerate(values):
        sum_x += index
        sum_y += value
        sum_xy += index * value
        sum_xx += index * index

    return (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)


def project_point(index: int, count: int, value: float, min_value: float, max_value: float) -> Tuple[float, float]:
    """
    Map a series point onto the chart: index spans the padded width left to
    right, min_value sits on the bottom edge and max_value on the top edge.
    A flat series (min == max) is drawn along the top edge.
    """
    plot_width = CHART_WIDTH - 2 * CHART_PADDING
    plot_height = CHART_HEIGHT - 2 * CHART_PADDING

    x = CHART_PADDING + (index / max(count - 1, 1)) * plot_width
    if max_value == min_value:
        y = CHART_PADDING
    else:
        y = CHART_PADDING + (1 - (value - min_value) / (max_value - min_value)) * plot_height
    return round_half_up(x, 1), round_half_up(y, 1)


def analyze_trend(
    scores: Iterable[HistoricalScore], component: Union[TrendComponent, str] = TrendComponent.total
) -> TrendData:
    """Summary statistics, slope and chart coordinates over the days that have data."""
    component = TrendComponent(component)
    series = [(score.local_date, _component_value(score, component)) for score in scores if score.has_data]

    if not series:
        return TrendData()

    values = [value for _, value in series]
    n = len(values)
    min_value = min(values)
    max_value = max(values)

    data_points = []
    for index, (day, value) in enumerate(series):
        x, y = project_point(index, n, value, min_value, max_value)
        data_points.append(TrendDataPoint(date=day, value=value, x=x, y=y))

    return TrendData(
        data_points=data_points,
        points=" ".join(f"{p.x},{p.y}" for p in data_points),
        average=round_half_up(sum(values) / n),
        trend=round_half_up(linear_trend(values), 1),
        min_value=min_value,
        max_value=max_value,
    )


async def score_trends(
    session_factory: async_sessionmaker[AsyncSession],
    user_scope: str,
    days: Optional[int] = None,
    component: Union[TrendComponent, str] = TrendComponent.total,
) -> TrendData:
    """
    Trend of one score component over the trailing ``days`` ending today.

    Args:
        session_factory: Factory for read sessions
        user_scope: Owner of the logs
        days: Window length, 7-365; settings.DEFAULT_TREND_DAYS if omitted
        component: "total", "sleep", "habits", "mood" or "workouts"

    Raises:
        InputValidationError: window out of range or unknown component
    """
    if days is None:
        days = settings.DEFAULT_TREND_DAYS
    if isinstance(days, bool) or not isinstance(days, int) or not MIN_TREND_DAYS <= days <= MAX_TREND_DAYS:
        raise InputValidationError(f"Days must be an integer between {MIN_TREND_DAYS} and {MAX_TREND_DAYS}")
    try:
        component = TrendComponent(component)
    except ValueError as e:
        raise InputValidationError(f"Unknown score component: {component}") from e

    end_date = parse_local_date(today())
    start_date = end_date - timedelta(days=days - 1)

    history = await historical_scores(session_factory, user_scope, start_date, end_date)
    result = analyze_trend(history.scores, component)
    logger.debug(
        f"Trend of {component.value} over {days} days for {user_scope}: "
        f"{len(result.data_points)} points, slope {result.trend}"
    )
    return result
