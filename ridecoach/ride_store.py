"""SQLAlchemy-backed ride source for coaching context builds.

Each read runs in a worker thread with its own session so the assembler can
issue them concurrently.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ridecoach.models import AthleteProfile, Ride, TrainingPlan
from ridecoach.services.rides import ProfileRecord, RideRecord, as_utc, profile_from_row, ride_from_row

_RIDE_COLUMNS = (
    "recorded_at",
    "duration_seconds",
    "distance_km",
    "elevation_gain_m",
    "normalized_power",
    "average_power",
    "training_stress_score",
    "name",
)


def _row(obj, columns) -> dict:
    return {c: getattr(obj, c) for c in columns}


class SqlRideSource:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _run(self, query: Callable[[Session], object]):
        session = self._session_factory()
        try:
            return query(session)
        finally:
            session.close()

    def _query_rides(
        self,
        user_id: str,
        since: datetime | None,
        until: datetime | None,
        newest_first: bool,
        limit: int | None,
        min_duration_seconds: float | None,
    ) -> list[RideRecord]:
        stmt = select(Ride).where(Ride.user_id == user_id)
        if since is not None:
            stmt = stmt.where(Ride.recorded_at >= as_utc(since))
        if until is not None:
            stmt = stmt.where(Ride.recorded_at <= as_utc(until))
        if min_duration_seconds is not None:
            stmt = stmt.where(Ride.duration_seconds >= min_duration_seconds)
        order = Ride.recorded_at.desc() if newest_first else Ride.recorded_at.asc()
        stmt = stmt.order_by(order, Ride.id)
        if limit is not None:
            stmt = stmt.limit(limit)

        def query(session: Session) -> list[RideRecord]:
            return [ride_from_row(_row(r, _RIDE_COLUMNS)) for r in session.scalars(stmt)]

        return self._run(query)

    async def fetch_rides(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
        newest_first: bool = False,
        limit: int | None = None,
        min_duration_seconds: float | None = None,
    ) -> list[RideRecord]:
        return await asyncio.to_thread(
            self._query_rides, user_id, since, until, newest_first, limit, min_duration_seconds
        )

    def _query_profile(self, user_id: str) -> ProfileRecord | None:
        def query(session: Session) -> ProfileRecord | None:
            profile = session.get(AthleteProfile, user_id)
            if profile is None:
                return None
            return profile_from_row(_row(profile, ("ftp", "resting_hr", "max_hr", "weekly_hours_target", "primary_goal")))

        return self._run(query)

    async def fetch_profile(self, user_id: str) -> ProfileRecord | None:
        return await asyncio.to_thread(self._query_profile, user_id)

    def _query_active_plan(self, user_id: str) -> ProfileRecord | None:
        stmt = (
            select(TrainingPlan)
            .where(TrainingPlan.user_id == user_id, TrainingPlan.status == "active")
            .order_by(TrainingPlan.created_at.desc(), TrainingPlan.id.desc())
            .limit(1)
        )

        def query(session: Session) -> ProfileRecord | None:
            plan = session.scalars(stmt).first()
            if plan is None:
                return None
            return profile_from_row(
                _row(plan, ("ftp", "resting_hr", "max_heart_rate", "hours_per_week", "goal_type"))
            )

        return self._run(query)

    async def fetch_active_plan(self, user_id: str) -> ProfileRecord | None:
        return await asyncio.to_thread(self._query_active_plan, user_id)
