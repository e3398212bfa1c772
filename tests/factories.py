"""Builders and constants shared by the test modules."""

from datetime import date, datetime

from habitcheck.core.models import AggregatedStat, Habit

REFERENCE_DATE = date(2024, 1, 15)  # a Monday
REPORT_TIME = datetime(2024, 1, 15, 9, 30, 0)
USER = {"X-User-Id": "alice"}
OTHER_USER = {"X-User-Id": "bob"}


def make_habit(name="Read", created_at=datetime(2024, 1, 1, 8, 0), completed=(), user_id="alice", icon=None):
    habit = Habit.create(user_id=user_id, name=name, icon=icon, created_at=created_at)
    for day in completed:
        habit.tracking.toggle(day)
    return habit


def make_stat(name, percentage, completed=0, total=0, icon="📝"):
    return AggregatedStat(
        habit_id=f"id-{name}",
        name=name,
        icon=icon,
        completed_count=completed,
        total_count=total,
        percentage=percentage,
    )
