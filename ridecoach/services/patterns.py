"""Behavioural patterns: consistency, preferred days, recency and rest days."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta

from ridecoach.services.rides import RideRecord, RideSummary, as_utc, recorded_by, ride_date, ride_power
from ridecoach.services.weekly import WeeklySummary

NEUTRAL_CONSISTENCY = 50
OVERSHOOT_CAP = 1.5
PREFERRED_DAYS_WINDOW_DAYS = 84
UNKNOWN_DAYS_SINCE = 999
REST_DAY_LOOKBACK_DAYS = 14
BEST_EFFORT_MIN_SECONDS = 1200

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_name(moment: datetime) -> str:
    return WEEKDAY_NAMES[as_utc(moment).weekday()]


def consistency_score(weeks: list[WeeklySummary], target_hours_per_week: float | None) -> int:
    """Score 0-100 for how closely weekly hours track the target.

    Hitting the target scores 100; both under- and over-training lose points
    symmetrically, with overshoot capped at 150% of target. Weeks with no
    riding are skipped. No target or no qualifying weeks scores 50.
    """
    if not target_hours_per_week or not weeks:
        return NEUTRAL_CONSISTENCY

    scores = []
    for week in weeks:
        if week.hours <= 0:
            continue
        ratio = min(week.hours / target_hours_per_week, OVERSHOOT_CAP)
        score = (2 - ratio) * 100 if ratio > 1 else ratio * 100
        scores.append(max(0.0, min(100.0, score)))

    if not scores:
        return NEUTRAL_CONSISTENCY
    return round(sum(scores) / len(scores))


def preferred_days(rides: list[RideRecord], now: datetime, limit: int = 2) -> list[str]:
    """Most-ridden weekday names over the trailing 12 weeks.

    Ties keep the order in which weekdays first appear in ``rides``.
    """
    cutoff = as_utc(now) - timedelta(days=PREFERRED_DAYS_WINDOW_DAYS)
    recent = [r for r in recorded_by(rides, now) if as_utc(r.recorded_at) >= cutoff]
    counts = Counter(weekday_name(r.recorded_at) for r in recent)
    return [day for day, _ in counts.most_common(limit)]


def days_since_last_ride(rides: list[RideRecord], now: datetime) -> int:
    """Calendar days since the most recent ride; 999 when there are none."""
    past = recorded_by(rides, now)
    if not past:
        return UNKNOWN_DAYS_SINCE
    last = max(ride_date(r) for r in past)
    return (as_utc(now).date() - last).days


def days_since_rest_day(rides: list[RideRecord], now: datetime) -> int:
    """Consecutive riding days counting back from today, capped at 14.

    Today only counts once a ride has been logged; an empty today is not yet
    a rest day, so the count then starts from yesterday.
    """
    ride_days = {ride_date(r) for r in recorded_by(rides, now)}
    today = as_utc(now).date()
    start = 0 if today in ride_days else 1

    streak = 0
    for i in range(start, start + REST_DAY_LOOKBACK_DAYS):
        if today - timedelta(days=i) not in ride_days:
            break
        streak += 1
    return streak


def avg_rides_per_week(weeks: list[WeeklySummary]) -> float:
    """Mean ride count over weeks that had at least one ride."""
    active = [w.ride_count for w in weeks if w.ride_count > 0]
    if not active:
        return 0.0
    return round(sum(active) / len(active), 1)


def avg_ride_duration(recent: list[RideSummary]) -> int:
    """Mean duration in minutes of the recent-ride sample."""
    if not recent:
        return 0
    return round(sum(r.duration for r in recent) / len(recent))


def avg_weighted_power(weeks: list[WeeklySummary]) -> int | None:
    """Mean weekly average power over the last four weeks that report power."""
    powers = [w.avg_normalized_power for w in weeks[:4] if w.avg_normalized_power]
    if not powers:
        return None
    return round(sum(powers) / len(powers))


def best_20min_power(rides: list[RideRecord]) -> int | None:
    """Highest ride power among rides of at least 20 minutes."""
    powers = [ride_power(r) for r in rides if (r.duration_seconds or 0) >= BEST_EFFORT_MIN_SECONDS]
    best = max(powers, default=0)
    return round(best) if best > 0 else None
