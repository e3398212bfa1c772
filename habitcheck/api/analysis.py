import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from habitcheck.api.dependencies import (
    get_analytics_engine, get_current_time, get_current_user_id, get_database, get_reference_date,
)
from habitcheck.api.schemas import AutoAnalysisResponse, OverviewResponse
from habitcheck.core.analytics import AnalyticsEngine
from habitcheck.core.database import HabitDatabase
from habitcheck.core.report import REPORT_FILENAME, REPORT_MEDIA_TYPE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
    today: date = Depends(get_reference_date)
):
    """
    Today's completion and month statistics for every habit
    """
    return OverviewResponse(**engine.overview(database.list_habits(user_id), today))


@router.get("/auto", response_model=AutoAnalysisResponse)
def get_auto_analysis(
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
    today: date = Depends(get_reference_date)
):
    """
    Most and least followed habits this month with suggestions
    """
    return AutoAnalysisResponse(**engine.auto_analysis(database.list_habits(user_id), today))


@router.get("/report", response_class=PlainTextResponse)
def download_report(
    user_id: str = Depends(get_current_user_id),
    database: HabitDatabase = Depends(get_database),
    engine: AnalyticsEngine = Depends(get_analytics_engine),
    today: date = Depends(get_reference_date),
    now: datetime = Depends(get_current_time)
):
    habits = database.list_habits(user_id)
    report = engine.report(habits, today, now)
    logger.info(f"📄 Report generated for user {user_id} ({len(habits)} habits)")

    return PlainTextResponse(
        content=report,
        media_type=REPORT_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"}
    )
