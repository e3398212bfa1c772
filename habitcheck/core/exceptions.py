#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Core Exceptions
Error taxonomy shared by the engine, the database and the API layer
"""


class HabitCheckError(Exception):
    """Base exception for all HabitCheck errors"""
    pass


class ValidationError(HabitCheckError):
    """Invalid input: malformed date, empty name, oversized icon"""
    pass


class HabitNotFoundError(HabitCheckError):
    """Habit does not exist or belongs to another user"""

    def __init__(self, habit_id: str):
        self.habit_id = habit_id
        super().__init__(f"Habit not found: {habit_id}")


class EmptyInputError(HabitCheckError):
    """Ranking was requested for an empty set of habits"""
    pass


# ===== DATABASE =====

class DatabaseError(HabitCheckError):
    """Base exception for database errors"""
    pass


class DatabaseCorruptionError(DatabaseError):
    """Database file could not be parsed"""
    pass


__all__ = [
    'HabitCheckError',
    'ValidationError',
    'HabitNotFoundError',
    'EmptyInputError',
    'DatabaseError',
    'DatabaseCorruptionError',
]
