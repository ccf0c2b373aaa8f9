from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class HabitWithCompletion(BaseModel):
    id: int
    name: str
    weight: int = 1
    completed: bool = False
    completed_at: Optional[datetime] = None

    model_config = dict(from_attributes=True)


@dataclass(frozen=True)
class DayScoreInput:
    """Raw facts for one day; a domain left as None is treated as not logged."""
    sleep_duration_mins: Optional[int] = None
    habits: Optional[List[HabitWithCompletion]] = None
    mood_rating: Optional[int] = None
    running_completed: Optional[bool] = None
    calisthenics_completed: Optional[bool] = None


class ComponentScores(BaseModel):
    sleep: int = Field(default=0, ge=0, le=100)
    habits: int = Field(default=0, ge=0, le=100)
    mood: int = Field(default=0, ge=0, le=100)
    workouts: int = Field(default=0, ge=0, le=100)


class DayScore(BaseModel):
    total: int = Field(..., ge=0, le=100)
    breakdown: ComponentScores
    tips: List[str] = Field(default_factory=list)


class HistoricalScore(BaseModel):
    local_date: str
    total_score: int = Field(default=0, ge=0, le=100)
    breakdown: ComponentScores = Field(default_factory=ComponentScores)
    has_data: bool = False


class DateRange(BaseModel):
    start: str
    end: str


class HeatmapData(BaseModel):
    scores: List[HistoricalScore]
    date_range: DateRange
    max_score: int


class TrendDataPoint(BaseModel):
    date: str
    value: int
    x: float
    y: float


class TrendData(BaseModel):
    data_points: List[TrendDataPoint] = Field(default_factory=list)
    points: str = ""  # "x,y x,y ..." ready for an SVG polyline
    average: int = 0
    trend: float = 0  # > 0 improving, < 0 declining
    min_value: int = 0
    max_value: int = 100
