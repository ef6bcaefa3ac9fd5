"""Load and power trend classification from weekly summaries.

Both trends compare the two most recent weeks (offsets 0-1) against the two
weeks before them (offsets 2-3). Thresholds are fixed:

- load: > +15% building, < -30% declining, < -15% recovering, else maintaining
- power: > +5% improving, < -5% declining, else stable
"""

from __future__ import annotations

from typing import Callable

from ridecoach.services.weekly import WeeklySummary

Ladder = tuple[tuple[Callable[[float], bool], str], ...]

LOAD_TREND_LADDER: Ladder = (
    (lambda change: change > 0.15, "building"),
    (lambda change: change < -0.30, "declining"),
    (lambda change: change < -0.15, "recovering"),
)

POWER_TREND_LADDER: Ladder = (
    (lambda change: change > 0.05, "improving"),
    (lambda change: change < -0.05, "declining"),
)


def _classify(change: float, ladder: Ladder, default: str) -> str:
    for matches, label in ladder:
        if matches(change):
            return label
    return default


def load_trend(weeks: list[WeeklySummary]) -> str:
    """Classify weekly TSS as building, maintaining, declining or recovering.

    Fewer than three weeks is 'maintaining'. Any load after a zero-load prior
    period is 'building'.
    """
    if len(weeks) < 3:
        return "maintaining"

    recent = (weeks[0].total_tss + weeks[1].total_tss) / 2
    prior_week_3 = weeks[3].total_tss if len(weeks) > 3 else 0
    prior = (weeks[2].total_tss + prior_week_3) / 2

    if prior == 0:
        return "building"
    return _classify((recent - prior) / prior, LOAD_TREND_LADDER, "maintaining")


def power_trend(weeks: list[WeeklySummary]) -> str:
    """Classify weekly average power as improving, declining or stable."""
    recent = [w.avg_normalized_power for w in weeks[0:2] if w.avg_normalized_power]
    prior = [w.avg_normalized_power for w in weeks[2:4] if w.avg_normalized_power]
    if not recent or not prior:
        return "stable"

    recent_avg = sum(recent) / len(recent)
    prior_avg = sum(prior) / len(prior)
    return _classify((recent_avg - prior_avg) / prior_avg, POWER_TREND_LADDER, "stable")
