"""
Daily scoring: component scorers, input validators and the composite day score.

Every function here is pure. Scorers without validation rules (sleep,
habits, workouts) accept any input and never raise; the mood scorer and the
validators raise InputValidationError with a readable message.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence

from dayscore.exceptions import InputValidationError
from dayscore.schemas.score import ComponentScores, DayScore, DayScoreInput
from dayscore.utils.rounding import round_half_up
from dayscore.utils.timezone_utils import LOCAL_TIME_PATTERN, LocalDateLike, duration_minutes, today

SCORE_WEIGHTS = {
    "sleep": 0.3,
    "habits": 0.3,
    "mood": 0.2,
    "workouts": 0.2,
}

MIN_SLEEP_MINUTES = 60
MAX_SLEEP_MINUTES = 16 * 60
MIN_MOOD_RATING = 1
MAX_MOOD_RATING = 5


def field_value(entry: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an attribute-bearing object."""
    if isinstance(entry, Mapping):
        return entry.get(name, default)
    return getattr(entry, name, default)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


# ---------------------------------------------------------------------------
# Sleep
# ---------------------------------------------------------------------------

def sleep_score(duration_mins: float) -> int:
    """Map a sleep duration in minutes onto one of 100/80/60/40/20."""
    hours = duration_mins / 60

    # 7-9h is optimal
    if 7 <= hours <= 9:
        return 100
    if 6 <= hours < 7:
        return 80
    if 5 <= hours < 6:
        return 60
    if 4 <= hours < 5:
        return 40
    if 9 < hours <= 10:
        return 80
    if hours > 10:
        return 60

    return 20


def validate_sleep_times(sleep_start: str, wake_time: str, local_date: Optional[LocalDateLike] = None) -> None:
    """
    Check both times are HH:MM and the resulting sleep lasts 1 to 16 hours.

    Args:
        sleep_start: Bedtime, HH:MM (24-hour)
        wake_time: Wake-up time, HH:MM (24-hour)
        local_date: Night the sleep started; today in the reference zone if omitted

    Raises:
        InputValidationError: malformed time or out-of-range duration
    """
    if not isinstance(sleep_start, str) or not LOCAL_TIME_PATTERN.match(sleep_start):
        raise InputValidationError("Invalid sleep start time format. Use HH:MM (24-hour format)")

    if not isinstance(wake_time, str) or not LOCAL_TIME_PATTERN.match(wake_time):
        raise InputValidationError("Invalid wake time format. Use HH:MM (24-hour format)")

    duration = duration_minutes(sleep_start, wake_time, local_date or today())

    if duration < MIN_SLEEP_MINUTES:
        raise InputValidationError("Sleep duration must be at least 1 hour")

    if duration > MAX_SLEEP_MINUTES:
        raise InputValidationError("Sleep duration cannot exceed 16 hours")


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

def habits_score(habits: Iterable[Any]) -> int:
    """Weighted share of completed habits, 0-100. Empty or zero-weight input scores 0."""
    habits = list(habits)
    if not habits:
        return 0

    total_weight = sum(field_value(habit, "weight", 1) for habit in habits)
    completed_weight = sum(
        field_value(habit, "weight", 1) for habit in habits if field_value(habit, "completed", False)
    )

    if total_weight == 0:
        return 0

    return round_half_up(completed_weight / total_weight * 100)


def validate_habit_completions(habit_completions: Sequence[Any]) -> None:
    """Each entry needs a positive integer ``habit_id`` and a boolean ``completed``."""
    if not isinstance(habit_completions, (list, tuple)):
        raise InputValidationError("Habit completions must be a list")

    for completion in habit_completions:
        habit_id = field_value(completion, "habit_id")
        if isinstance(habit_id, bool) or not isinstance(habit_id, int) or habit_id <= 0:
            raise InputValidationError("Habit ID must be a positive integer")

        if not isinstance(field_value(completion, "completed"), bool):
            raise InputValidationError("Completed status must be a boolean")


# ---------------------------------------------------------------------------
# Mood
# ---------------------------------------------------------------------------

def validate_mood_rating(rating: Any) -> None:
    if not _is_integer(rating):
        raise InputValidationError("Mood rating must be an integer")

    if rating < MIN_MOOD_RATING or rating > MAX_MOOD_RATING:
        raise InputValidationError("Mood rating must be between 1 and 5")


def mood_score(rating: int) -> int:
    """Convert a 1-5 rating to 0-100 (1 -> 0, 3 -> 50, 5 -> 100)."""
    validate_mood_rating(rating)
    return round_half_up((rating - 1) / 4 * 100)


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------

def workout_score(running_completed: bool, calisthenics_completed: bool) -> int:
    # Any completed workout earns full points
    if running_completed or calisthenics_completed:
        return 100

    return 0


def validate_workout_completion(running_completed: Any, calisthenics_completed: Any) -> None:
    if not isinstance(running_completed, bool):
        raise InputValidationError("Running completion status must be a boolean")

    if not isinstance(calisthenics_completed, bool):
        raise InputValidationError("Calisthenics completion status must be a boolean")


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

def component_scores(data: DayScoreInput) -> ComponentScores:
    """Score each domain that has data; a domain without data contributes 0."""
    sleep = sleep_score(data.sleep_duration_mins) if data.sleep_duration_mins is not None else 0

    habits = habits_score(data.habits) if data.habits else 0

    mood = mood_score(data.mood_rating) if data.mood_rating is not None else 0

    if data.running_completed is not None and data.calisthenics_completed is not None:
        workouts = workout_score(data.running_completed, data.calisthenics_completed)
    else:
        workouts = 0

    return ComponentScores(sleep=sleep, habits=habits, mood=mood, workouts=workouts)


def total_score(components: ComponentScores) -> int:
    """Weighted sum of the four component scores."""
    return round_half_up(
        components.sleep * SCORE_WEIGHTS["sleep"]
        + components.habits * SCORE_WEIGHTS["habits"]
        + components.mood * SCORE_WEIGHTS["mood"]
        + components.workouts * SCORE_WEIGHTS["workouts"]
    )


def generate_tips(components: ComponentScores) -> List[str]:
    """At most one tip per domain, in the order sleep, habits, mood, workouts."""
    tips: List[str] = []

    if components.sleep == 0:
        tips.append("Log your sleep to track your rest quality")
    elif components.sleep < 60:
        tips.append("Try to get 7-9 hours of sleep for optimal recovery")
    elif components.sleep == 100:
        tips.append("Great sleep! You're in the optimal 7-9 hour range")

    if components.habits == 0:
        tips.append("Start completing your daily habits to build consistency")
    elif components.habits < 50:
        tips.append("Focus on completing more of your important habits")
    elif components.habits >= 80:
        tips.append("Excellent habit consistency! Keep up the great work")

    if components.mood == 0:
        tips.append("Track your mood to understand your emotional patterns")
    elif components.mood < 50:
        tips.append("Consider activities that boost your mood and well-being")
    elif components.mood >= 75:
        tips.append("Your mood is looking great today!")

    if components.workouts == 0:
        tips.append("Add some physical activity to boost your energy")
    elif components.workouts == 100:
        tips.append("Awesome! You completed your workout today")

    return tips


def day_score(data: DayScoreInput) -> DayScore:
    breakdown = component_scores(data)
    return DayScore(
        total=total_score(breakdown),
        breakdown=breakdown,
        tips=generate_tips(breakdown),
    )
