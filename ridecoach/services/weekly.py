"""Weekly aggregation of rides into offset-from-now buckets.

Week 0 is the seven days ending at the reference time, week 1 the seven days
before that, and so on. Buckets are relative to "now", not calendar weeks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd

from ridecoach.services.rides import RideRecord, as_utc, ride_power
from ridecoach.services.tss import estimate_tss, ride_hours

DEFAULT_WEEKS_BACK = 6
_WEEK = timedelta(days=7)


@dataclass(frozen=True)
class WeeklySummary:
    """Aggregated training for one week offset."""
    week_offset: int
    total_tss: int
    hours: float
    ride_count: int
    avg_normalized_power: int | None


def week_offset(recorded_at: datetime, now: datetime) -> int:
    """Whole weeks between a ride and the reference time (floor division)."""
    return math.floor((as_utc(now) - as_utc(recorded_at)) / _WEEK)


def _empty_week(offset: int) -> WeeklySummary:
    return WeeklySummary(week_offset=offset, total_tss=0, hours=0.0, ride_count=0, avg_normalized_power=None)


def weekly_summaries(rides: list[RideRecord], now: datetime, weeks: int = DEFAULT_WEEKS_BACK) -> list[WeeklySummary]:
    """Bucket rides into ``weeks`` summaries ordered newest (offset 0) first.

    Always returns exactly ``weeks`` entries; weeks without rides are zero-filled.
    Rides outside the window (including future-dated rides) are ignored. Rides
    without power are left out of the weekly power mean rather than counted as 0.
    """
    rows = []
    for ride in rides:
        power = ride_power(ride)
        rows.append({
            "week_offset": week_offset(ride.recorded_at, now),
            "tss": float(estimate_tss(ride)),
            "hours": ride_hours(ride),
            "power": power if power > 0 else math.nan,
        })

    frame = pd.DataFrame(rows, columns=["week_offset", "tss", "hours", "power"])
    frame = frame[(frame["week_offset"] >= 0) & (frame["week_offset"] < weeks)]
    if frame.empty:
        return [_empty_week(i) for i in range(weeks)]

    frame = frame.astype({"week_offset": int, "tss": float, "hours": float, "power": float})
    grouped = frame.groupby("week_offset").agg(
        total_tss=("tss", "sum"),
        hours=("hours", "sum"),
        ride_count=("tss", "size"),
        avg_power=("power", "mean"),
    )

    summaries: list[WeeklySummary] = []
    for offset in range(weeks):
        if offset not in grouped.index:
            summaries.append(_empty_week(offset))
            continue
        row = grouped.loc[offset]
        summaries.append(WeeklySummary(
            week_offset=offset,
            total_tss=int(round(row["total_tss"])),
            hours=round(float(row["hours"]), 1),
            ride_count=int(row["ride_count"]),
            avg_normalized_power=int(round(row["avg_power"])) if pd.notna(row["avg_power"]) else None,
        ))
    return summaries
