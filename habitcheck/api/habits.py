from datetime import date

from fastapi import APIRouter, Depends, status

from habitcheck.api.dependencies import get_analytics_engine, get_current_user_id, get_database, get_reference_date
from habitcheck.api.schemas import (
    APIResponse, CreateHabitRequest, HabitListResponse, HabitOut, HabitResponse,
    MonthlyResponse, TrackRequest, TrackResponse, UpdateHabitRequest, WeeklyResponse,
)
from habitcheck.core.analytics import AnalyticsEngine
from habitcheck.core.database import HabitDatabase

router = APIRouter(prefix="/api/habits", tags=["habits"])


@router.get("", response_model=HabitListResponse)
def list_habits(
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database)
):
    """
    All habits of the user, newest first
    """
    habits = database.list_habits(user_id)
    return HabitListResponse(habits=[HabitOut.from_habit(h) for h in habits])


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(
    payload: CreateHabitRequest,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database)
):
    habit = database.create_habit(user_id, payload.name, payload.icon)
    return HabitResponse(message="Habit created successfully", habit=HabitOut.from_habit(habit))


@router.put("/{habit_id}", response_model=HabitResponse)
def update_habit(
    habit_id: str,
    payload: UpdateHabitRequest,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database)
):
    habit = database.update_habit(user_id, habit_id, name=payload.name, icon=payload.icon)
    return HabitResponse(message="Habit updated successfully", habit=HabitOut.from_habit(habit))


@router.delete("/{habit_id}", response_model=APIResponse)
def delete_habit(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database)
):
    """
    Delete a habit together with its whole tracking history
    """
    database.delete_habit(user_id, habit_id)
    return APIResponse(message="Habit deleted successfully")


@router.post("/{habit_id}/track", response_model=TrackResponse)
def track_habit(
    habit_id: str,
    payload: TrackRequest,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database)
):
    """
    Toggle completion of the habit on the given date
    """
    habit, completed = database.toggle_tracking(user_id, habit_id, payload.date)
    return TrackResponse(
        message="Tracking updated successfully",
        completed=completed,
        habit=HabitOut.from_habit(habit)
    )


@router.get("/{habit_id}/weekly", response_model=WeeklyResponse)
def weekly_analysis(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
    today: date = Depends(get_reference_date)
):
    """
    Completion for each of the last four Sunday-Saturday weeks
    """
    habit = database.get_habit(user_id, habit_id)
    return WeeklyResponse(**engine.weekly(habit, today))


@router.get("/{habit_id}/monthly", response_model=MonthlyResponse)
def monthly_analysis(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
    today: date = Depends(get_reference_date)
):
    habit = database.get_habit(user_id, habit_id)
    return MonthlyResponse(**engine.monthly(habit, today))
