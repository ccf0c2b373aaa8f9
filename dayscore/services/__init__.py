from .scoring import (
    SCORE_WEIGHTS,
    sleep_score,
    habits_score,
    mood_score,
    workout_score,
    component_scores,
    total_score,
    generate_tips,
    day_score,
    validate_sleep_times,
    validate_mood_rating,
    validate_habit_completions,
    validate_workout_completion,
)
from .day_score import get_day_score, get_dashboard_data
from .history import aggregate_history, historical_scores
from .trends import TrendComponent, analyze_trend, score_trends
from .daily_log import record_sleep, record_mood, record_habit_completions, record_workout

__all__ = [
    "SCORE_WEIGHTS",
    "sleep_score",
    "habits_score",
    "mood_score",
    "workout_score",
    "component_scores",
    "total_score",
    "generate_tips",
    "day_score",
    "validate_sleep_times",
    "validate_mood_rating",
    "validate_habit_completions",
    "validate_workout_completion",
    "get_day_score",
    "get_dashboard_data",
    "aggregate_history",
    "historical_scores",
    "TrendComponent",
    "analyze_trend",
    "score_trends",
    "record_sleep",
    "record_mood",
    "record_habit_completions",
    "record_workout",
]
