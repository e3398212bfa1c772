"""Habit tracking and analytics engine."""
