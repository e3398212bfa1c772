#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Core Data Models
Habits, sparse per-date tracking and aggregated statistics

Version: 1.0.0
"""

import uuid
import logging
from datetime import datetime
from typing import Dict, List, Optional, Any, Iterator
from dataclasses import dataclass, field, asdict

from habitcheck.core.exceptions import ValidationError
from habitcheck.utils.datetime_utils import validate_date_string

logger = logging.getLogger(__name__)

HABIT_NAME_MAX_LENGTH = 100
HABIT_ICON_MAX_LENGTH = 10
DEFAULT_HABIT_ICON = "📝"

# ===== VALIDATION HELPERS =====

def validate_text(text: str, min_length: int = 1, max_length: int = 1000, field_name: str = "text") -> str:
    """Validate and trim a text field"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) < min_length:
        if min_length == 1:
            raise ValidationError(f"{field_name} is required")
        raise ValidationError(f"{field_name} must be at least {min_length} characters")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")

    return text


def validate_icon(icon: Optional[str], max_length: int = HABIT_ICON_MAX_LENGTH,
                  default: str = DEFAULT_HABIT_ICON) -> str:
    """Icons are short labels; an empty or missing icon falls back to the default"""
    if icon is None or icon == "":
        return default
    if not isinstance(icon, str):
        raise ValidationError("icon must be a string")
    if len(icon) > max_length:
        raise ValidationError(f"Icon cannot exceed {max_length} characters")
    return icon

# ===== TRACKING =====

@dataclass
class TrackingEntry:
    """Completion record of one habit on one calendar date"""
    date: str  # YYYY-MM-DD
    completed: bool = False

    def __post_init__(self):
        validate_date_string(self.date)
        self.completed = bool(self.completed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackingEntry":
        return cls(date=data["date"], completed=data.get("completed", False))


class TrackingStore:
    """
    Sparse date -> TrackingEntry map for a single habit.

    An absent date means "never tracked", which is not the same as an entry
    with completed=False. Entries are only created or flipped by toggle().
    """

    def __init__(self, entries: Optional[Dict[str, TrackingEntry]] = None):
        self._entries: Dict[str, TrackingEntry] = dict(entries or {})

    def get(self, date: str) -> Optional[TrackingEntry]:
        return self._entries.get(date)

    def is_completed(self, date: str) -> bool:
        entry = self._entries.get(date)
        return entry is not None and entry.completed

    def toggle(self, date: str) -> bool:
        """Create the entry as completed, or flip an existing one. Returns the new flag."""
        validate_date_string(date)

        entry = self._entries.get(date)
        if entry is None:
            entry = TrackingEntry(date=date, completed=True)
            self._entries[date] = entry
        else:
            entry.completed = not entry.completed

        return entry.completed

    def discard(self, date: str) -> None:
        """Forget a date entirely, so it reads as never tracked"""
        self._entries.pop(date, None)

    def completed_dates(self) -> List[str]:
        return sorted(d for d, e in self._entries.items() if e.completed)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, date: object) -> bool:
        return date in self._entries

    def __iter__(self) -> Iterator[TrackingEntry]:
        return iter(self._entries.values())

    # ===== SERIALIZATION =====

    def to_list(self) -> List[Dict[str, Any]]:
        return [self._entries[d].to_dict() for d in sorted(self._entries)]

    @classmethod
    def from_list(cls, items: List[Dict[str, Any]]) -> "TrackingStore":
        entries: Dict[str, TrackingEntry] = {}
        for item in items or []:
            entry = TrackingEntry.from_dict(item)
            if entry.date in entries:
                logger.warning(f"Duplicate tracking entry for {entry.date}, keeping the last one")
            entries[entry.date] = entry
        return cls(entries)

# ===== HABIT =====

@dataclass
class Habit:
    """A recurring habit owned by one user"""
    habit_id: str
    user_id: str
    name: str
    icon: str = DEFAULT_HABIT_ICON
    created_at: datetime = field(default_factory=datetime.now)
    tracking: TrackingStore = field(default_factory=TrackingStore)

    def __post_init__(self):
        self.name = validate_text(self.name, min_length=1, max_length=HABIT_NAME_MAX_LENGTH,
                                  field_name="Habit name")
        self.icon = validate_icon(self.icon)

    def rename(self, name: str) -> None:
        self.name = validate_text(name, min_length=1, max_length=HABIT_NAME_MAX_LENGTH,
                                  field_name="Habit name")

    def change_icon(self, icon: Optional[str]) -> None:
        self.icon = validate_icon(icon)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "habit_id": self.habit_id,
            "user_id": self.user_id,
            "name": self.name,
            "icon": self.icon,
            "created_at": self.created_at.isoformat(),
            "tracking": self.tracking.to_list(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        try:
            return cls(
                habit_id=data["habit_id"],
                user_id=str(data["user_id"]),
                name=data["name"],
                icon=data.get("icon", DEFAULT_HABIT_ICON),
                created_at=datetime.fromisoformat(data["created_at"]),
                tracking=TrackingStore.from_list(data.get("tracking", [])),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Could not load habit: {e}")

    @classmethod
    def create(cls, user_id: str, name: str, icon: Optional[str] = None,
               created_at: Optional[datetime] = None) -> "Habit":
        """Create a new habit with an empty tracking store"""
        return cls(
            habit_id=str(uuid.uuid4()),
            user_id=str(user_id),
            name=name,
            icon=validate_icon(icon),
            created_at=created_at or datetime.now(),
        )

# ===== AGGREGATED RESULTS =====

@dataclass(frozen=True)
class CompletionSummary:
    completed_count: int
    total_count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AggregatedStat:
    """Per-habit completion statistics over one window"""
    habit_id: str
    name: str
    icon: str
    completed_count: int
    total_count: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WeekBreakdown:
    label: str
    completed_days: int
    total_days: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    'HABIT_NAME_MAX_LENGTH',
    'HABIT_ICON_MAX_LENGTH',
    'DEFAULT_HABIT_ICON',
    'validate_text',
    'validate_icon',
    'TrackingEntry',
    'TrackingStore',
    'Habit',
    'CompletionSummary',
    'AggregatedStat',
    'WeekBreakdown',
]
