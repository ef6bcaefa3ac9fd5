from __future__ import annotations

from datetime import datetime, timezone

from ridecoach.db import get_session_factory
from ridecoach.ride_store import SqlRideSource
from ridecoach.services.coaching_context import RideSource


def get_ride_source() -> RideSource:
    return SqlRideSource(get_session_factory())


def get_reference_time() -> datetime:
    return datetime.now(timezone.utc)
