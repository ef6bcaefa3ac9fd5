"""Tests for consistency, preferred days, recency and rest-day patterns."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ridecoach.services.patterns import (
    avg_ride_duration,
    avg_rides_per_week,
    avg_weighted_power,
    best_20min_power,
    consistency_score,
    days_since_last_ride,
    days_since_rest_day,
    preferred_days,
    weekday_name,
)
from ridecoach.services.rides import RideRecord, RideSummary
from ridecoach.services.weekly import WeeklySummary

# A Wednesday
NOW = datetime(2026, 3, 11, 12, 0, tzinfo=timezone.utc)


def _ride(days_ago: float, **fields) -> RideRecord:
    return RideRecord(recorded_at=NOW - timedelta(days=days_ago), **fields)


def _week(offset: int, hours: float = 0.0, rides: int = 0, power: int | None = None) -> WeeklySummary:
    return WeeklySummary(week_offset=offset, total_tss=0, hours=hours, ride_count=rides, avg_normalized_power=power)


def test_weekday_name():
    assert weekday_name(NOW) == "Wednesday"


# --- Consistency ---

def test_consistency_neutral_without_target():
    weeks = [_week(0, hours=10), _week(1, hours=3)]
    assert consistency_score(weeks, None) == 50
    assert consistency_score(weeks, 0) == 50
    assert consistency_score([], 8) == 50


def test_consistency_on_target():
    weeks = [_week(i, hours=10) for i in range(4)]
    assert consistency_score(weeks, 10) == 100


def test_consistency_penalises_under_and_over():
    assert consistency_score([_week(0, hours=5)], 10) == 50
    assert consistency_score([_week(0, hours=15)], 10) == 50
    assert consistency_score([_week(0, hours=20)], 10) == 50
    assert consistency_score([_week(0, hours=5), _week(1, hours=10)], 10) == 75


def test_consistency_skips_idle_weeks():
    assert consistency_score([_week(0, hours=0), _week(1, hours=10)], 10) == 100
    assert consistency_score([_week(0), _week(1)], 10) == 50


# --- Preferred days ---

def test_preferred_days_top_two():
    rides = [
        _ride(2),    # Monday
        _ride(9),    # Monday
        _ride(16),   # Monday
        _ride(1),    # Tuesday
        _ride(0),    # Wednesday
        _ride(7),    # Wednesday
    ]
    assert preferred_days(rides, NOW) == ["Monday", "Wednesday"]


def test_preferred_days_ties_keep_first_seen_order():
    rides = [_ride(1), _ride(5)]  # Tuesday, Friday
    assert preferred_days(rides, NOW) == ["Tuesday", "Friday"]
    assert preferred_days(list(reversed(rides)), NOW) == ["Friday", "Tuesday"]


def test_preferred_days_ignores_rides_older_than_twelve_weeks():
    rides = [_ride(100), _ride(107), _ride(1)]
    assert preferred_days(rides, NOW) == ["Tuesday"]
    assert preferred_days([], NOW) == []


# --- Recency ---

def test_days_since_last_ride():
    assert days_since_last_ride([], NOW) == 999
    assert days_since_last_ride([_ride(0)], NOW) == 0
    yesterday_late = RideRecord(recorded_at=datetime(2026, 3, 10, 23, 0, tzinfo=timezone.utc))
    assert days_since_last_ride([_ride(10), yesterday_late], NOW) == 1


def test_days_since_rest_day_yesterday_only():
    assert days_since_rest_day([_ride(1)], NOW) == 1


def test_days_since_rest_day_counts_streak_including_today():
    rides = [_ride(0), _ride(1), _ride(2), _ride(4)]
    assert days_since_rest_day(rides, NOW) == 3
    assert days_since_rest_day([_ride(0)], NOW) == 1


def test_days_since_rest_day_stops_at_first_gap():
    assert days_since_rest_day([_ride(2), _ride(3)], NOW) == 0
    assert days_since_rest_day([], NOW) == 0


def test_days_since_rest_day_saturates_at_fourteen():
    every_day = [_ride(d) for d in range(30)]
    assert days_since_rest_day(every_day, NOW) == 14
    not_today = [_ride(d) for d in range(1, 30)]
    assert days_since_rest_day(not_today, NOW) == 14


def test_rides_after_now_do_not_count():
    later_today = RideRecord(recorded_at=NOW + timedelta(hours=3))
    friday = RideRecord(recorded_at=NOW + timedelta(days=2))
    assert days_since_last_ride([later_today, friday], NOW) == 999
    assert days_since_last_ride([_ride(1), later_today], NOW) == 1
    assert days_since_rest_day([_ride(1), later_today], NOW) == 1
    assert preferred_days([_ride(1), friday, friday], NOW) == ["Tuesday"]


# --- Frequency, duration and power ---

def test_avg_rides_per_week():
    assert avg_rides_per_week([_week(0, rides=2), _week(1), _week(2, rides=3)]) == 2.5
    assert avg_rides_per_week([_week(0), _week(1)]) == 0.0


def test_avg_ride_duration():
    recent = [
        RideSummary(date="2026-03-10", duration=60, tss=50, type="endurance"),
        RideSummary(date="2026-03-09", duration=90, tss=75, type="tempo"),
    ]
    assert avg_ride_duration(recent) == 75
    assert avg_ride_duration([]) == 0


def test_avg_weighted_power_uses_last_four_weeks():
    weeks = [_week(0, power=200), _week(1), _week(2, power=220), _week(3, power=240), _week(4, power=400)]
    assert avg_weighted_power(weeks) == 220
    assert avg_weighted_power([_week(0), _week(1)]) is None


def test_best_20min_power():
    rides = [
        _ride(1, duration_seconds=1000, normalized_power_w=400),
        _ride(2, duration_seconds=3600, normalized_power_w=250),
        _ride(3, duration_seconds=1800, average_power_w=280),
    ]
    assert best_20min_power(rides) == 280
    assert best_20min_power([]) is None
    assert best_20min_power([_ride(1, duration_seconds=3600)]) is None
