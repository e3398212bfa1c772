"""
Plain-text habit report.
"""

from datetime import datetime
from typing import List, Sequence

from habitcheck.core.models import AggregatedStat

REPORT_FILENAME = "habit-report.txt"
REPORT_MEDIA_TYPE = "text/plain"
REPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
RULE = "-" * 40


def format_report(habit_stats: Sequence[AggregatedStat], generated_at: datetime) -> str:
    """Render stats in the order given; the output depends only on the arguments"""
    lines: List[str] = [
        "HABIT TRACKER REPORT",
        f"Generated on: {generated_at.strftime(REPORT_TIMESTAMP_FORMAT)}",
        "",
        f"Total Habits: {len(habit_stats)}",
        RULE,
        "",
    ]

    for stat in habit_stats:
        lines.extend([
            f"Habit: {stat.icon} {stat.name}",
            f"Completion Rate: {stat.percentage}%",
            f"Days Tracked: {stat.total_count}",
            f"Days Completed: {stat.completed_count}",
            "",
        ])

    return "\n".join(lines) + "\n"
