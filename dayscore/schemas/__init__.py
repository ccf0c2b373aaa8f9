from .score import (
    HabitWithCompletion, DayScoreInput, ComponentScores, DayScore,
    HistoricalScore, DateRange, HeatmapData, TrendDataPoint, TrendData,
)
from .daily_log import SleepSummary, HabitsSummary, MoodSummary, WorkoutSummary, DashboardData

__all__ = [
    "HabitWithCompletion",
    "DayScoreInput",
    "ComponentScores",
    "DayScore",
    "HistoricalScore",
    "DateRange",
    "HeatmapData",
    "TrendDataPoint",
    "TrendData",
    "SleepSummary",
    "HabitsSummary",
    "MoodSummary",
    "WorkoutSummary",
    "DashboardData",
]
