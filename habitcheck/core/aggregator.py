#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Completion Aggregator
Folds a date window over a tracking store into counts and a percentage
"""

import math
from typing import Iterable, List

from habitcheck.core.models import AggregatedStat, CompletionSummary, Habit, TrackingStore, WeekBreakdown
from habitcheck.core.windows import build_week_blocks
from habitcheck.utils.datetime_utils import DateLike


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (50.5 -> 51)"""
    if value < 0:
        return -round_half_up(-value)
    return int(math.floor(value + 0.5))


def completion_percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(completed / total * 100)


def aggregate(store: TrackingStore, window: Iterable[str]) -> CompletionSummary:
    """One store probe per window date; untracked days count as missed"""
    total = 0
    completed = 0
    for day in window:
        total += 1
        if store.is_completed(day):
            completed += 1

    return CompletionSummary(
        completed_count=completed,
        total_count=total,
        percentage=completion_percentage(completed, total),
    )


def aggregate_habit(habit: Habit, window: Iterable[str]) -> AggregatedStat:
    summary = aggregate(habit.tracking, window)
    return AggregatedStat(
        habit_id=habit.habit_id,
        name=habit.name,
        icon=habit.icon,
        completed_count=summary.completed_count,
        total_count=summary.total_count,
        percentage=summary.percentage,
    )


def weekly_breakdown(store: TrackingStore, reference_date: DateLike) -> List[WeekBreakdown]:
    """Per-week completion over the last four weeks; future days are left out of the totals"""
    weeks = []
    for block in build_week_blocks(reference_date):
        summary = aggregate(store, block.dates)
        weeks.append(WeekBreakdown(
            label=block.label,
            completed_days=summary.completed_count,
            total_days=summary.total_count,
            percentage=summary.percentage,
        ))
    return weeks
