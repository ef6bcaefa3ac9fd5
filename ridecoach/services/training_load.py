"""Fitness / fatigue model: CTL, ATL and TSB from daily TSS.

Daily TSS over the last 90 days is expanded into a dense series (oldest day
first, rest days as zero) and run through two exponentially weighted moving
averages:

- CTL (fitness): 42-day time constant
- ATL (fatigue): 7-day time constant
- TSB (form): CTL - ATL

Each average uses value_t = value_{t-1} + (tss_t - value_{t-1}) / time_constant,
seeded at zero, so a constant daily load is approached from below but never
exceeded.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ridecoach.services.rides import RideRecord, as_utc, recorded_by, ride_date
from ridecoach.services.tss import estimate_tss

LOAD_WINDOW_DAYS = 90
CTL_TIME_CONSTANT = 42
ATL_TIME_CONSTANT = 7


@dataclass(frozen=True)
class LoadMetrics:
    """Rounded chronic/acute load and their balance."""
    ctl: int
    atl: int
    tsb: int


def daily_loads(rides: list[RideRecord], now: datetime, days: int = LOAD_WINDOW_DAYS) -> dict[date, float]:
    """Sum estimated TSS per calendar day over the trailing ``days`` days.

    Rides recorded after ``now`` are ignored.
    """
    today = as_utc(now).date()
    first_day = today - timedelta(days=days - 1)
    loads: dict[date, float] = {}
    for ride in recorded_by(rides, now):
        day = ride_date(ride)
        if first_day <= day <= today:
            loads[day] = loads.get(day, 0) + estimate_tss(ride)
    return loads


def daily_tss_series(loads: dict[date, float], now: datetime, days: int = LOAD_WINDOW_DAYS) -> list[float]:
    """Dense oldest-to-newest series ending today; missing days are 0."""
    today = as_utc(now).date()
    return [float(loads.get(today - timedelta(days=i), 0)) for i in range(days - 1, -1, -1)]


def ewma(series: list[float], time_constant: int) -> float:
    """Exponentially weighted moving average of a series, seeded at 0."""
    value = 0.0
    for tss in series:
        value += (tss - value) / time_constant
    return value


def compute_load_metrics(rides: list[RideRecord], now: datetime) -> LoadMetrics:
    """CTL/ATL/TSB for the 90 days ending at ``now``.

    No rides in the window gives all zeros.
    """
    series = daily_tss_series(daily_loads(rides, now), now)
    ctl = round(ewma(series, CTL_TIME_CONSTANT))
    atl = round(ewma(series, ATL_TIME_CONSTANT))
    return LoadMetrics(ctl=ctl, atl=atl, tsb=ctl - atl)
