"""Tests for ride coercion and ride-type classification."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ridecoach.services.rides import (
    RideRecord,
    as_number,
    as_utc,
    classify_ride_type,
    profile_from_row,
    ride_date,
    ride_from_row,
    ride_power,
)


def test_as_number_rejects_invalid_values():
    assert as_number(None) is None
    assert as_number("abc") is None
    assert as_number(-5) is None
    assert as_number(float("nan")) is None
    assert as_number(float("inf")) is None
    assert as_number(True) is None
    assert as_number("12.5") == 12.5
    assert as_number(0) == 0.0


def test_ride_from_row_accepts_legacy_columns():
    ride = ride_from_row({
        "recorded_at": "2026-03-10T07:30:00Z",
        "duration": 5400,
        "elevation_gain": 450,
        "tss": 95,
        "route_name": "Hill loop",
    })
    assert ride.recorded_at == datetime(2026, 3, 10, 7, 30, tzinfo=timezone.utc)
    assert ride.duration_seconds == 5400
    assert ride.elevation_gain_m == 450
    assert ride.stored_tss == 95
    assert ride.name == "Hill loop"


def test_ride_from_row_prefers_primary_columns():
    ride = ride_from_row({
        "recorded_at": datetime(2026, 3, 10, 7, 30),
        "duration_seconds": 3600,
        "duration": 10,
        "training_stress_score": 0,
        "tss": 70,
        "normalized_power": "bad",
        "average_power": 180,
    })
    assert ride.duration_seconds == 3600
    # zero stored score falls through to the legacy column
    assert ride.stored_tss == 70
    assert ride.normalized_power_w is None
    assert ride.average_power_w == 180
    assert ride.name is None


def test_ride_date_uses_utc():
    tz = timezone(timedelta(hours=-8))
    ride = RideRecord(recorded_at=datetime(2026, 3, 10, 20, 0, tzinfo=tz))
    assert ride_date(ride) == date(2026, 3, 11)
    assert as_utc(datetime(2026, 3, 10, 20, 0)).tzinfo == timezone.utc


def test_ride_power_falls_back_to_average():
    at = datetime(2026, 3, 10)
    assert ride_power(RideRecord(at, normalized_power_w=210, average_power_w=180)) == 210
    assert ride_power(RideRecord(at, average_power_w=180)) == 180
    assert ride_power(RideRecord(at)) == 0


def test_profile_from_row_reads_plan_columns():
    profile = profile_from_row({"ftp": 280, "max_heart_rate": 188, "hours_per_week": 10, "goal_type": "gran_fondo", "resting_hr": None})
    assert profile.ftp == 280
    assert profile.max_hr == 188
    assert profile.resting_hr is None
    assert profile.weekly_hours_target == 10
    assert profile.goal_type == "gran_fondo"
    assert profile_from_row(None) is None


def test_classify_ride_type_ladder():
    ftp = 200
    assert classify_ride_type(100, None, ftp) == "easy"
    assert classify_ride_type(140, None, ftp) == "endurance"
    assert classify_ride_type(170, None, ftp) == "tempo"
    assert classify_ride_type(185, None, ftp) == "threshold"
    assert classify_ride_type(200, None, ftp) == "vo2max"
    assert classify_ride_type(220, None, ftp) == "race"


def test_classify_ride_type_fallbacks():
    assert classify_ride_type(300, None, None) == "endurance"
    assert classify_ride_type(300, None, 0) == "endurance"
    assert classify_ride_type(None, 100, 200) == "easy"
    assert classify_ride_type(None, None, 200) == "easy"
