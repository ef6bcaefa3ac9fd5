"""Coaching context assembly.

Pulls an athlete's profile, active plan and ride history from a ``RideSource``,
runs the training-load services over it and returns one immutable
``CoachingContext``. All reads are issued concurrently and joined before any
computation; if any read fails the whole build fails.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol

from ridecoach.exceptions import CoachingContextError
from ridecoach.logging_config import get_logger
from ridecoach.services.patterns import (
    BEST_EFFORT_MIN_SECONDS,
    PREFERRED_DAYS_WINDOW_DAYS,
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
from ridecoach.services.rides import (
    ProfileRecord,
    RideRecord,
    RideSummary,
    as_number,
    as_utc,
    classify_ride_type,
    recorded_by,
    ride_date,
)
from ridecoach.services.training_load import LOAD_WINDOW_DAYS, compute_load_metrics
from ridecoach.services.trends import load_trend, power_trend
from ridecoach.services.tss import estimate_tss, ride_hours
from ridecoach.services.weekly import DEFAULT_WEEKS_BACK, weekly_summaries

logger = get_logger(__name__)

DEFAULT_FTP = 250
DEFAULT_WEEKLY_HOURS_TARGET = 8
DEFAULT_RECENT_RIDES = 5


class RideSource(Protocol):
    """Read-only access to an athlete's stored rides and settings."""

    async def fetch_rides(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
        newest_first: bool = False,
        limit: int | None = None,
        min_duration_seconds: float | None = None,
    ) -> list[RideRecord]: ...

    async def fetch_profile(self, user_id: str) -> ProfileRecord | None: ...

    async def fetch_active_plan(self, user_id: str) -> ProfileRecord | None: ...


@dataclass(frozen=True)
class AthleteProfile:
    ftp: float
    resting_hr: int | None
    max_hr: int | None
    weekly_hours_target: float
    goals: str | None


@dataclass(frozen=True)
class LoadSection:
    weekly_tss: tuple[int, ...]
    weekly_hours: tuple[float, ...]
    ctl: int
    atl: int
    tsb: int
    load_trend: str


@dataclass(frozen=True)
class PerformanceSection:
    avg_weighted_power: int | None
    best_20min_power: int | None
    power_trend: str


@dataclass(frozen=True)
class PatternSection:
    avg_rides_per_week: float
    avg_ride_duration: int
    preferred_days: tuple[str, ...]
    days_since_last_ride: int
    days_since_rest_day: int
    consistency_score: int


@dataclass(frozen=True)
class CoachingContext:
    """Computed training picture for one athlete at one point in time."""
    profile: AthleteProfile
    load: LoadSection
    performance: PerformanceSection
    patterns: PatternSection
    recent_rides: tuple[RideSummary, ...]
    today: str
    day_of_week: str

    def to_dict(self) -> dict[str, Any]:
        """camelCase, JSON-ready rendering."""
        return {
            "profile": {
                "ftp": self.profile.ftp,
                "restingHR": self.profile.resting_hr,
                "maxHR": self.profile.max_hr,
                "weeklyHoursTarget": self.profile.weekly_hours_target,
                "goals": self.profile.goals,
            },
            "load": {
                "weeklyTSS": list(self.load.weekly_tss),
                "weeklyHours": list(self.load.weekly_hours),
                "ctl": self.load.ctl,
                "atl": self.load.atl,
                "tsb": self.load.tsb,
                "loadTrend": self.load.load_trend,
            },
            "performance": {
                "avgWeightedPower": self.performance.avg_weighted_power,
                "best20MinPower": self.performance.best_20min_power,
                "powerTrend": self.performance.power_trend,
            },
            "patterns": {
                "avgRidesPerWeek": self.patterns.avg_rides_per_week,
                "avgRideDuration": self.patterns.avg_ride_duration,
                "preferredDays": list(self.patterns.preferred_days),
                "daysSinceLastRide": self.patterns.days_since_last_ride,
                "daysSinceRestDay": self.patterns.days_since_rest_day,
                "consistencyScore": self.patterns.consistency_score,
            },
            "recentRides": [
                {"date": r.date, "duration": r.duration, "tss": r.tss, "type": r.type, "title": r.title}
                for r in self.recent_rides
            ],
            "today": self.today,
            "dayOfWeek": self.day_of_week,
        }


def _setting(*values: Any, default: Any = None) -> Any:
    # First positive finite value; NaN and inf fall through.
    for value in values:
        number = as_number(value)
        if number:
            return value
    return default


def resolve_profile(profile: ProfileRecord | None, plan: ProfileRecord | None) -> AthleteProfile:
    """Merge plan and profile settings, plan first, with explicit fallbacks."""
    plan = plan or ProfileRecord()
    profile = profile or ProfileRecord()
    return AthleteProfile(
        ftp=_setting(plan.ftp, profile.ftp, default=DEFAULT_FTP),
        resting_hr=_setting(plan.resting_hr, profile.resting_hr),
        max_hr=_setting(plan.max_hr, profile.max_hr),
        weekly_hours_target=_setting(
            plan.weekly_hours_target, profile.weekly_hours_target, default=DEFAULT_WEEKLY_HOURS_TARGET
        ),
        goals=plan.goal_type or profile.goal_type or None,
    )


def summarize_ride(ride: RideRecord, ftp: float | None) -> RideSummary:
    return RideSummary(
        date=ride_date(ride).isoformat(),
        duration=round(ride_hours(ride) * 60),
        tss=estimate_tss(ride),
        type=classify_ride_type(ride.normalized_power_w, ride.average_power_w, ftp),
        title=ride.name,
    )


async def build_coaching_context(
    source: RideSource,
    user_id: str,
    *,
    now: datetime,
    include_recent_rides: int = DEFAULT_RECENT_RIDES,
    weeks_back: int = DEFAULT_WEEKS_BACK,
) -> CoachingContext:
    """Build the coaching context for ``user_id`` as of ``now``.

    Raises ValueError for invalid options and CoachingContextError when any
    upstream read fails.
    """
    if weeks_back < 1:
        raise ValueError("weeks_back must be at least 1")
    if include_recent_rides < 0:
        raise ValueError("include_recent_rides must not be negative")

    now = as_utc(now)
    weekly_since = now - timedelta(weeks=weeks_back)
    logger.debug("coaching_context_build_started", extra={"ctx_user_id": user_id, "ctx_weeks_back": weeks_back})

    try:
        profile_row, plan_row, weekly_rides, load_rides, latest_rides, day_rides, effort_rides = await asyncio.gather(
            source.fetch_profile(user_id),
            source.fetch_active_plan(user_id),
            source.fetch_rides(user_id, since=weekly_since, until=now),
            source.fetch_rides(user_id, since=now - timedelta(days=LOAD_WINDOW_DAYS), until=now),
            source.fetch_rides(user_id, until=now, newest_first=True, limit=max(include_recent_rides, 1)),
            source.fetch_rides(user_id, since=now - timedelta(days=PREFERRED_DAYS_WINDOW_DAYS), until=now),
            source.fetch_rides(
                user_id, since=weekly_since, until=now, min_duration_seconds=BEST_EFFORT_MIN_SECONDS
            ),
        )
    except Exception as exc:
        logger.exception("coaching_context_build_failed", extra={"ctx_user_id": user_id})
        raise CoachingContextError(user_id) from exc

    athlete = resolve_profile(profile_row, plan_row)
    weeks = weekly_summaries(weekly_rides, now, weeks_back)
    metrics = compute_load_metrics(load_rides, now)
    latest_rides = recorded_by(latest_rides, now)
    recent = [summarize_ride(r, athlete.ftp) for r in latest_rides[:include_recent_rides]]

    context = CoachingContext(
        profile=athlete,
        load=LoadSection(
            weekly_tss=tuple(w.total_tss for w in weeks),
            weekly_hours=tuple(w.hours for w in weeks),
            ctl=metrics.ctl,
            atl=metrics.atl,
            tsb=metrics.tsb,
            load_trend=load_trend(weeks),
        ),
        performance=PerformanceSection(
            avg_weighted_power=avg_weighted_power(weeks),
            best_20min_power=best_20min_power(recorded_by(effort_rides, now)),
            power_trend=power_trend(weeks),
        ),
        patterns=PatternSection(
            avg_rides_per_week=avg_rides_per_week(weeks),
            avg_ride_duration=avg_ride_duration(recent),
            preferred_days=tuple(preferred_days(day_rides, now)),
            days_since_last_ride=days_since_last_ride(latest_rides, now),
            days_since_rest_day=days_since_rest_day(load_rides, now),
            consistency_score=consistency_score(weeks, athlete.weekly_hours_target),
        ),
        recent_rides=tuple(recent),
        today=now.date().isoformat(),
        day_of_week=weekday_name(now),
    )

    logger.info(
        "coaching_context_built",
        extra={
            "ctx_user_id": user_id,
            "ctx_ctl": metrics.ctl,
            "ctx_atl": metrics.atl,
            "ctx_tsb": metrics.tsb,
            "ctx_load_trend": context.load.load_trend,
            "ctx_recent_rides": len(recent),
        },
    )
    return context


def build_coaching_context_sync(source: RideSource, user_id: str, **options: Any) -> CoachingContext:
    """Blocking wrapper for callers outside an event loop."""
    return asyncio.run(build_coaching_context(source, user_id, **options))


def format_coaching_context(context: CoachingContext) -> str:
    """Render a context as a short text block for a coaching prompt."""
    return "## Training Context\n" + json.dumps(context.to_dict(), indent=2)
