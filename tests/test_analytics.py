"""Tests for the request-level analytics composition."""

from datetime import datetime

import pytest

from habitcheck.core.analytics import AnalyticsEngine
from habitcheck.core.suggestions import NO_HABITS_MESSAGE
from tests.factories import REFERENCE_DATE, REPORT_TIME, make_habit


@pytest.fixture
def engine():
    return AnalyticsEngine()


class TestOverview:

    def test_no_habits(self, engine):
        overview = engine.overview([], REFERENCE_DATE)
        assert overview == {
            "total_habits": 0,
            "total_completed_today": 0,
            "completion_rate": 0,
            "monthly_stats": {},
        }

    def test_today_and_month_stats(self, engine):
        read = make_habit("Read", created_at=datetime(2024, 1, 10), completed=["2024-01-02", "2024-01-15"])
        walk = make_habit("Walk", completed=["2024-01-14"])

        overview = engine.overview([read, walk], REFERENCE_DATE)

        assert overview["total_habits"] == 2
        assert overview["total_completed_today"] == 1
        assert overview["completion_rate"] == 50
        # The month overview counts from the 1st regardless of creation date
        assert overview["monthly_stats"][read.habit_id] == {
            "name": "Read", "completed": 2, "total": 15, "percentage": 13,
        }
        assert overview["monthly_stats"][walk.habit_id]["percentage"] == 7


class TestAutoAnalysis:

    def test_no_habits_variant(self, engine):
        result = engine.auto_analysis([], REFERENCE_DATE)
        assert result["message"] == NO_HABITS_MESSAGE
        assert result["most_followed"] is None
        assert result["least_followed"] is None
        assert result["suggestions"] == ["Start by creating your first habit!"]

    def test_ranking_and_suggestions(self, engine):
        read = make_habit("Read", created_at=datetime(2024, 1, 10, 15, 30), completed=["2024-01-12", "2024-01-14"])
        walk = make_habit("Walk", created_at=datetime(2024, 1, 1))

        result = engine.auto_analysis([walk, read], REFERENCE_DATE)

        assert result["most_followed"]["name"] == "Read"
        assert result["most_followed"]["total_count"] == 6
        assert result["most_followed"]["percentage"] == 33
        assert result["least_followed"]["name"] == "Walk"
        assert result["least_followed"]["total_count"] == 15
        assert result["overall_percentage"] == 17
        assert [h["name"] for h in result["all_habits"]] == ["Read", "Walk"]
        assert result["suggestions"][0] == 'Focus on "Walk" - try setting a specific time of day for this habit.'
        assert result["suggestions"][2].startswith("Your overall completion rate is below 50%")

    def test_ties_broken_by_newest_first(self, engine):
        older = make_habit("Older", created_at=datetime(2024, 1, 2))
        newer = make_habit("Newer", created_at=datetime(2024, 1, 5))

        result = engine.auto_analysis([older, newer], REFERENCE_DATE)

        assert result["most_followed"]["name"] == "Newer"
        assert result["least_followed"]["name"] == "Older"

    def test_excellent_and_struggling(self, engine):
        days = [f"2024-01-{d:02d}" for d in range(1, 16)]
        strong = make_habit("Exercise", completed=days)
        weak = make_habit("Journal", completed=days[:2])

        suggestions = engine.auto_analysis([strong, weak], REFERENCE_DATE)["suggestions"]

        assert suggestions[0].startswith('Focus on "Journal"')
        assert suggestions[1].startswith("Journal needs attention!")
        assert suggestions[2] == 'Excellent work on "Exercise"! You\'re at 100% completion. Keep it up!'
        assert suggestions[-1].startswith("Remember:")


class TestSingleHabit:

    def test_weekly(self, engine):
        habit = make_habit("Read", completed=["2024-01-08", "2024-01-14", "2024-01-15"])
        weekly = engine.weekly(habit, REFERENCE_DATE)

        assert weekly["habit_name"] == "Read"
        assert weekly["weeks"][-1] == {"label": "Week 4", "completed_days": 2, "total_days": 2, "percentage": 100}

    def test_monthly(self, engine):
        habit = make_habit("Read", created_at=datetime(2024, 1, 10), completed=["2024-01-03", "2024-01-15"])
        monthly = engine.monthly(habit, REFERENCE_DATE)

        assert monthly == {
            "habit_name": "Read",
            "month": "January 2024",
            "completed_days": 2,
            "total_days": 15,
            "percentage": 13,
        }


def test_report_uses_month_to_date(engine):
    habit = make_habit("Read", icon="📚", created_at=datetime(2024, 1, 10, 15, 30), completed=["2024-01-12", "2024-01-14"])
    report = engine.report([habit], REFERENCE_DATE, REPORT_TIME)

    assert "Generated on: 2024-01-15 09:30:00" in report
    assert "Habit: 📚 Read" in report
    assert "Completion Rate: 33%" in report
    assert "Days Tracked: 6" in report
    assert "Days Completed: 2" in report
