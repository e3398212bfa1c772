#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Analytics Engine
Request-level composition of windows, aggregation, ranking, suggestions and
the text report. Stateless: nothing is cached between calls.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Sequence

from habitcheck.core.aggregator import aggregate, aggregate_habit, completion_percentage, round_half_up, weekly_breakdown
from habitcheck.core.models import AggregatedStat, Habit
from habitcheck.core.ranking import rank
from habitcheck.core.report import format_report
from habitcheck.core.suggestions import NO_HABITS_MESSAGE, NO_HABITS_SUGGESTIONS, overall_average, suggest
from habitcheck.core.windows import WindowKind, build_window
from habitcheck.utils.datetime_utils import DateLike, format_date, month_label, parse_date

logger = logging.getLogger(__name__)


def newest_first(habits: Sequence[Habit]) -> List[Habit]:
    return sorted(habits, key=lambda h: h.created_at, reverse=True)


class AnalyticsEngine:
    """Statistics over a single user's habits"""

    def month_to_date_stats(self, habits: Sequence[Habit], reference_date: DateLike) -> List[AggregatedStat]:
        return [
            aggregate_habit(habit, build_window(WindowKind.MONTH_TO_DATE, reference_date, habit.created_at))
            for habit in habits
        ]

    # ===== OVERVIEW =====

    def overview(self, habits: Sequence[Habit], reference_date: DateLike) -> Dict[str, Any]:
        today = format_date(parse_date(reference_date))
        month_window = build_window(WindowKind.MONTH_FULL, reference_date)

        completed_today = 0
        monthly_stats: Dict[str, Dict[str, Any]] = {}

        for habit in habits:
            if habit.tracking.is_completed(today):
                completed_today += 1

            summary = aggregate(habit.tracking, month_window)
            monthly_stats[habit.habit_id] = {
                "name": habit.name,
                "completed": summary.completed_count,
                "total": summary.total_count,
                "percentage": summary.percentage,
            }

        return {
            "total_habits": len(habits),
            "total_completed_today": completed_today,
            "completion_rate": completion_percentage(completed_today, len(habits)),
            "monthly_stats": monthly_stats,
        }

    # ===== AUTO ANALYSIS =====

    def auto_analysis(self, habits: Sequence[Habit], reference_date: DateLike) -> Dict[str, Any]:
        """Most/least followed habits this month with rule-based suggestions"""
        if not habits:
            return {
                "message": NO_HABITS_MESSAGE,
                "most_followed": None,
                "least_followed": None,
                "overall_percentage": 0,
                "all_habits": [],
                "suggestions": list(NO_HABITS_SUGGESTIONS),
            }

        stats = self.month_to_date_stats(newest_first(habits), reference_date)
        ranking = rank(stats)
        suggestions = suggest(stats, ranking.least, ranking.most)

        logger.debug(f"Auto analysis for {len(stats)} habits produced {len(suggestions)} suggestions")

        return {
            "most_followed": ranking.most.to_dict(),
            "least_followed": ranking.least.to_dict(),
            "overall_percentage": round_half_up(overall_average(stats)),
            "all_habits": [s.to_dict() for s in ranking.sorted_descending],
            "suggestions": suggestions,
        }

    # ===== SINGLE HABIT =====

    def weekly(self, habit: Habit, reference_date: DateLike) -> Dict[str, Any]:
        return {
            "habit_name": habit.name,
            "weeks": [w.to_dict() for w in weekly_breakdown(habit.tracking, reference_date)],
        }

    def monthly(self, habit: Habit, reference_date: DateLike) -> Dict[str, Any]:
        summary = aggregate(habit.tracking, build_window(WindowKind.MONTH_FULL, reference_date))
        return {
            "habit_name": habit.name,
            "month": month_label(parse_date(reference_date)),
            "completed_days": summary.completed_count,
            "total_days": summary.total_count,
            "percentage": summary.percentage,
        }

    # ===== REPORT =====

    def report(self, habits: Sequence[Habit], reference_date: DateLike, generated_at: datetime) -> str:
        return format_report(self.month_to_date_stats(habits, reference_date), generated_at)
