"""HabitCheck - habit tracking and completion analytics."""

__version__ = "1.0.0"
