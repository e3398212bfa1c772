#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitCheck - Suggestion Engine
Rule table mapping aggregated statistics to advisory text.

Rules are grouped; groups are evaluated in order and each contributes the
lines of its first matching rule. New rules are added by inserting into the
table, never by reordering it.
"""

from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Sequence, Tuple

from habitcheck.core.aggregator import round_half_up
from habitcheck.core.models import AggregatedStat

NO_HABITS_MESSAGE = "No habits found. Create your first habit to get started!"
NO_HABITS_SUGGESTIONS = ("Start by creating your first habit!",)


class SuggestionContext(NamedTuple):
    least: AggregatedStat
    most: AggregatedStat
    average: float  # unrounded, rounded only for display


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[SuggestionContext], bool]
    templates: Tuple[str, ...]

    def render(self, ctx: SuggestionContext) -> List[str]:
        return [t.format(least=ctx.least, most=ctx.most, average=round_half_up(ctx.average))
                for t in self.templates]


SUGGESTION_RULES: Tuple[Tuple[Rule, ...], ...] = (
    (
        Rule(
            name="least_struggling",
            predicate=lambda ctx: ctx.least.percentage < 30,
            templates=(
                'Focus on "{least.name}" - try setting a specific time of day for this habit.',
                "{least.name} needs attention! Consider breaking it into smaller, more manageable steps.",
            ),
        ),
        Rule(
            name="least_halfway",
            predicate=lambda ctx: ctx.least.percentage < 50,
            templates=(
                'You\'re at {least.percentage}% for "{least.name}". You\'re halfway there - keep pushing!',
            ),
        ),
    ),
    (
        Rule(
            name="most_excellent",
            predicate=lambda ctx: ctx.most.percentage >= 80,
            templates=(
                'Excellent work on "{most.name}"! You\'re at {most.percentage}% completion. Keep it up!',
            ),
        ),
    ),
    (
        Rule(
            name="average_low",
            predicate=lambda ctx: ctx.average < 50,
            templates=(
                "Your overall completion rate is below 50%. Try focusing on just 2-3 core habits first.",
            ),
        ),
        Rule(
            name="average_high",
            predicate=lambda ctx: ctx.average >= 70,
            templates=(
                "Great job! Your overall completion rate is {average}%. You're building strong habits!",
            ),
        ),
    ),
    (
        Rule(
            name="general_tips",
            predicate=lambda ctx: True,
            templates=(
                "Tip: Track your habits at the same time each day to build consistency.",
                "Remember: It takes 21-66 days to form a new habit. Be patient with yourself!",
            ),
        ),
    ),
)


def overall_average(stats: Sequence[AggregatedStat]) -> float:
    if not stats:
        return 0.0
    return sum(s.percentage for s in stats) / len(stats)


def suggest(stats: Sequence[AggregatedStat], least: AggregatedStat, most: AggregatedStat,
            rules: Sequence[Sequence[Rule]] = SUGGESTION_RULES) -> List[str]:
    """Evaluate the rule table; identical input always yields identical output"""
    ctx = SuggestionContext(least=least, most=most, average=overall_average(stats))

    suggestions: List[str] = []
    for group in rules:
        for rule in group:
            if rule.predicate(ctx):
                suggestions.extend(rule.render(ctx))
                break
    return suggestions
