from .habit import Habit, HabitLog
from .sleep import SleepLog
from .mood import MoodLog
from .workout import WorkoutLog

__all__ = [
    "Habit",
    "HabitLog",
    "SleepLog",
    "MoodLog",
    "WorkoutLog",
]
