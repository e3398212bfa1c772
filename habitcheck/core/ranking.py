"""
Cross-habit ranking by completion percentage.
"""

from dataclasses import dataclass
from typing import List, Sequence

from habitcheck.core.exceptions import EmptyInputError
from habitcheck.core.models import AggregatedStat


@dataclass(frozen=True)
class Ranking:
    most: AggregatedStat
    least: AggregatedStat
    sorted_descending: List[AggregatedStat]


def rank(stats: Sequence[AggregatedStat]) -> Ranking:
    """
    Order stats by percentage, highest first.

    The sort is stable: habits with equal percentages keep the order they were
    supplied in, so callers pass them newest first for a deterministic tie-break.
    """
    if not stats:
        raise EmptyInputError("Cannot rank an empty list of habits")

    ordered = sorted(stats, key=lambda s: s.percentage, reverse=True)
    return Ranking(most=ordered[0], least=ordered[-1], sorted_descending=ordered)
