from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .score import HabitWithCompletion


class SleepSummary(BaseModel):
    id: int
    local_date: str
    sleep_start_local: str
    wake_time_local: str
    duration_mins: int
    duration_label: str
    score: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HabitsSummary(BaseModel):
    habits: List[HabitWithCompletion] = Field(default_factory=list)
    score: int = 0
    total_weight: int = 0
    completed_weight: int = 0


class MoodSummary(BaseModel):
    rating: Optional[int] = None
    score: int = 0
    has_data: bool = False


class WorkoutSummary(BaseModel):
    running_completed: bool = False
    calisthenics_completed: bool = False
    score: int = 0
    has_data: bool = False


class DashboardData(BaseModel):
    local_date: str
    sleep: Optional[SleepSummary] = None
    habits: HabitsSummary
    mood: MoodSummary
    workouts: WorkoutSummary
