from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict
from datetime import datetime

from habitcheck.core.models import HABIT_ICON_MAX_LENGTH, HABIT_NAME_MAX_LENGTH, Habit
from habitcheck.utils.datetime_utils import DATE_PATTERN

# ===== HABITS =====

class TrackingEntryOut(BaseModel):
    date: str
    completed: bool


class HabitOut(BaseModel):
    habit_id: str
    user_id: str
    name: str
    icon: str
    created_at: datetime
    tracking: List[TrackingEntryOut] = []

    @classmethod
    def from_habit(cls, habit: Habit) -> "HabitOut":
        return cls(**habit.to_dict())


class CreateHabitRequest(BaseModel):
    name: str = Field(..., max_length=HABIT_NAME_MAX_LENGTH)
    icon: Optional[str] = Field(None, max_length=HABIT_ICON_MAX_LENGTH)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Habit name is required')
        return v.strip()


class UpdateHabitRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=HABIT_NAME_MAX_LENGTH)
    icon: Optional[str] = Field(None, max_length=HABIT_ICON_MAX_LENGTH)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Habit name cannot be empty')
        return v.strip() if v is not None else v


class TrackRequest(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN.pattern, description="YYYY-MM-DD")

# ===== RESPONSES =====

class APIResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class HabitListResponse(APIResponse):
    habits: List[HabitOut]


class HabitResponse(APIResponse):
    habit: HabitOut


class TrackResponse(HabitResponse):
    completed: bool


class WeekOut(BaseModel):
    label: str
    completed_days: int
    total_days: int
    percentage: int


class WeeklyResponse(APIResponse):
    habit_name: str
    weeks: List[WeekOut]


class MonthlyResponse(APIResponse):
    habit_name: str
    month: str
    completed_days: int
    total_days: int
    percentage: int


class MonthlyStat(BaseModel):
    name: str
    completed: int
    total: int
    percentage: int


class OverviewResponse(APIResponse):
    total_habits: int
    total_completed_today: int
    completion_rate: int
    monthly_stats: Dict[str, MonthlyStat]


class HabitStat(BaseModel):
    habit_id: str
    name: str
    icon: str
    completed_count: int
    total_count: int
    percentage: int


class AutoAnalysisResponse(APIResponse):
    most_followed: Optional[HabitStat] = None
    least_followed: Optional[HabitStat] = None
    overall_percentage: int = 0
    all_habits: List[HabitStat] = []
    suggestions: List[str]


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
