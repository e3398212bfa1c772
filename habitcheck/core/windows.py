#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Date Windows
Ordered calendar-date sequences that completion is aggregated over.

Every window is ascending, contiguous and never extends past the reference
date ("today"), which the caller always supplies explicitly.
"""

from datetime import date
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from habitcheck.core.exceptions import ValidationError
from habitcheck.utils.datetime_utils import (
    DateLike, add_days, format_date, month_end, month_start, parse_date, week_start,
)

WEEKS_IN_WINDOW = 4

Window = Tuple[str, ...]


class WindowKind(str, Enum):
    MONTH_TO_DATE = "monthToDate"
    LAST_4_WEEKS = "last4Weeks"
    MONTH_FULL = "monthFull"
    SINGLE_DAY = "singleDay"
    CUSTOM = "custom"


class WeekBlock(NamedTuple):
    label: str
    dates: Window


def date_range(start: date, end: date) -> Window:
    """Inclusive range of date strings; empty when start > end"""
    days = []
    current = start
    while current <= end:
        days.append(format_date(current))
        current = add_days(current, 1)
    return tuple(days)


def month_to_date_window(reference_date: DateLike, habit_created_at: Optional[DateLike] = None) -> Window:
    today = parse_date(reference_date)
    start = month_start(today)
    if habit_created_at is not None:
        # Habits created mid-month are not penalised for the days before they existed
        start = max(start, parse_date(habit_created_at))
    return date_range(start, today)


def build_week_blocks(reference_date: DateLike) -> List[WeekBlock]:
    """Four Sunday-Saturday blocks, oldest first, ending with the current week"""
    today = parse_date(reference_date)
    current_week = week_start(today)

    blocks = []
    for i in range(WEEKS_IN_WINDOW - 1, -1, -1):
        start = add_days(current_week, -7 * i)
        end = min(add_days(start, 6), today)
        blocks.append(WeekBlock(label=f"Week {WEEKS_IN_WINDOW - i}", dates=date_range(start, end)))
    return blocks


def last_four_weeks_window(reference_date: DateLike) -> Window:
    days: List[str] = []
    for block in build_week_blocks(reference_date):
        days.extend(block.dates)
    return tuple(days)


def month_full_window(reference_date: DateLike) -> Window:
    today = parse_date(reference_date)
    return date_range(month_start(today), min(month_end(today), today))


def custom_window(start: Optional[DateLike], end: Optional[DateLike], reference_date: DateLike) -> Window:
    if start is None or end is None:
        raise ValidationError("A custom window needs both a start and an end date")

    first = parse_date(start)
    last = parse_date(end)
    if first > last:
        raise ValidationError(f"Window start {format_date(first)} is after its end {format_date(last)}")

    return date_range(first, min(last, parse_date(reference_date)))


def build_window(kind, reference_date: DateLike, habit_created_at: Optional[DateLike] = None,
                 start: Optional[DateLike] = None, end: Optional[DateLike] = None) -> Window:
    """
    Build the date window of the given kind.

    Only monthToDate is clipped to the habit creation date; the other kinds
    count every day of their range.
    """
    try:
        kind = WindowKind(kind)
    except ValueError:
        valid = ", ".join(k.value for k in WindowKind)
        raise ValidationError(f"Unknown window kind {kind!r}, expected one of: {valid}")

    if kind is WindowKind.MONTH_TO_DATE:
        return month_to_date_window(reference_date, habit_created_at)
    if kind is WindowKind.LAST_4_WEEKS:
        return last_four_weeks_window(reference_date)
    if kind is WindowKind.MONTH_FULL:
        return month_full_window(reference_date)
    if kind is WindowKind.SINGLE_DAY:
        return (format_date(parse_date(reference_date)),)
    return custom_window(start, end, reference_date)


__all__ = [
    'Window',
    'WindowKind',
    'WeekBlock',
    'date_range',
    'build_window',
    'build_week_blocks',
    'month_to_date_window',
    'last_four_weeks_window',
    'month_full_window',
    'custom_window',
]
