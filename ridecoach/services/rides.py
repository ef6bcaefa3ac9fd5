"""Ride and athlete value types shared by the training-load services.

Rows coming out of the ride store are irregular: older imports use different
column names and any numeric field may be missing. ``ride_from_row`` and
``profile_from_row`` normalise them into frozen records so the analytics code
only ever sees finite, non-negative numbers or ``None``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Mapping


@dataclass(frozen=True)
class RideRecord:
    """A single recorded ride as read from storage."""
    recorded_at: datetime
    duration_seconds: float | None = None
    distance_km: float | None = None
    elevation_gain_m: float | None = None
    normalized_power_w: float | None = None
    average_power_w: float | None = None
    stored_tss: float | None = None
    name: str | None = None


@dataclass(frozen=True)
class ProfileRecord:
    """Athlete settings from either the profile or the active training plan."""
    ftp: float | None = None
    resting_hr: int | None = None
    max_hr: int | None = None
    weekly_hours_target: float | None = None
    goal_type: str | None = None


@dataclass(frozen=True)
class RideSummary:
    """Compact view of a recent ride for the coaching context."""
    date: str            # ISO date
    duration: int        # minutes
    tss: int | float  # estimated TSS is an int, stored TSS passes through
    type: str
    title: str | None = None


def as_number(value: Any) -> float | None:
    """Coerce a stored value to a finite non-negative float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number) or number < 0:
        return None
    return number


def as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def ride_date(ride: RideRecord) -> date:
    """Calendar (UTC) date on which a ride was recorded."""
    return as_utc(ride.recorded_at).date()


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    # Truthiness, not presence: a zero in the first column falls through.
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def ride_from_row(row: Mapping[str, Any]) -> RideRecord:
    """Build a RideRecord from a storage row, accepting legacy column names."""
    name = _first(row, "route_name", "name")
    return RideRecord(
        recorded_at=_parse_timestamp(row["recorded_at"]),
        duration_seconds=as_number(_first(row, "duration_seconds", "duration")),
        distance_km=as_number(_first(row, "distance_km", "distance")),
        elevation_gain_m=as_number(_first(row, "elevation_gain_m", "elevation_gain")),
        normalized_power_w=as_number(row.get("normalized_power")),
        average_power_w=as_number(row.get("average_power")),
        stored_tss=as_number(_first(row, "training_stress_score", "tss")),
        name=str(name) if name else None,
    )


def profile_from_row(row: Mapping[str, Any] | None) -> ProfileRecord | None:
    """Build a ProfileRecord from a profile or training-plan row."""
    if row is None:
        return None
    resting = as_number(row.get("resting_hr"))
    max_hr = as_number(_first(row, "max_hr", "max_heart_rate"))
    goal = _first(row, "goal_type", "primary_goal")
    return ProfileRecord(
        ftp=as_number(row.get("ftp")),
        resting_hr=int(resting) if resting else None,
        max_hr=int(max_hr) if max_hr else None,
        weekly_hours_target=as_number(_first(row, "weekly_hours_target", "hours_per_week")),
        goal_type=str(goal) if goal else None,
    )


def recorded_by(rides: list[RideRecord], now: datetime) -> list[RideRecord]:
    """Rides recorded at or before ``now``; later rides are not yet history."""
    cutoff = as_utc(now)
    return [r for r in rides if as_utc(r.recorded_at) <= cutoff]


def ride_power(ride: RideRecord) -> float:
    """Normalized power when recorded, else average power, else 0."""
    return ride.normalized_power_w or ride.average_power_w or 0.0


# ---------------------------------------------------------------------------
# Ride-type classification (ratio of FTP ladder)
# ---------------------------------------------------------------------------

RIDE_TYPE_LADDER: tuple[tuple[Callable[[float], bool], str], ...] = (
    (lambda intensity: intensity < 0.55, "easy"),
    (lambda intensity: intensity < 0.75, "endurance"),
    (lambda intensity: intensity < 0.87, "tempo"),
    (lambda intensity: intensity < 0.95, "threshold"),
    (lambda intensity: intensity < 1.05, "vo2max"),
)


def classify_ride_type(normalized_power: float | None, average_power: float | None, ftp: float | None) -> str:
    """Label a ride by intensity relative to FTP.

    Returns one of: easy, endurance, tempo, threshold, vo2max, race.
    Without a usable FTP every ride is labelled 'endurance'.
    """
    if not ftp:
        return "endurance"
    intensity = (normalized_power or average_power or 0) / ftp
    for matches, label in RIDE_TYPE_LADDER:
        if matches(intensity):
            return label
    return "race"
