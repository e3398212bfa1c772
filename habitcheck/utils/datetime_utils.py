import re
from datetime import date, datetime, timedelta
from typing import Union

from habitcheck.core.exceptions import ValidationError

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[date, datetime, str]

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def validate_date_string(value: str) -> str:
    """Return the value unchanged if it is a real YYYY-MM-DD date."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationError(f"Date must be in YYYY-MM-DD format: {value!r}")
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise ValidationError(f"Invalid calendar date: {value!r}")
    return value


def parse_date(value: DateLike) -> date:
    """Coerce a date, a datetime (time dropped) or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    validate_date_string(value)
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(dt: date, fmt: str = DATE_FORMAT) -> str:
    return dt.strftime(fmt)


def add_days(dt: date, days: int) -> date:
    return dt + timedelta(days=days)


def month_start(dt: date) -> date:
    return dt.replace(day=1)


def month_end(dt: date) -> date:
    if dt.month == 12:
        return date(dt.year, 12, 31)
    return date(dt.year, dt.month + 1, 1) - timedelta(days=1)


def week_start(dt: date) -> date:
    """Sunday of the week containing dt (weeks start on Sunday)."""
    return dt - timedelta(days=(dt.weekday() + 1) % 7)


def month_label(dt: date) -> str:
    """'January 2024'; %B would follow the process locale"""
    return f"{MONTH_NAMES[dt.month - 1]} {dt.year}"
