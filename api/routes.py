from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from api.deps import get_reference_time, get_ride_source
from api.observability import health_payload
from api.schemas import CoachingContextOut, HealthOut
from ridecoach.config import get_settings
from ridecoach.services.coaching_context import (
    CoachingContext,
    RideSource,
    build_coaching_context,
    format_coaching_context,
)

router = APIRouter()
settings = get_settings()


@router.get("/health", response_model=HealthOut, tags=["system"])
def health():
    return health_payload()


async def _context(
    user_id: str,
    source: Annotated[RideSource, Depends(get_ride_source)],
    now: Annotated[datetime, Depends(get_reference_time)],
    include_recent_rides: int = Query(settings.default_recent_rides, ge=0, le=settings.max_recent_rides),
    weeks_back: int = Query(settings.default_weeks_back, ge=1, le=settings.max_weeks_back),
) -> CoachingContext:
    return await build_coaching_context(
        source,
        user_id,
        now=now,
        include_recent_rides=include_recent_rides,
        weeks_back=weeks_back,
    )


@router.get("/athletes/{user_id}/coaching-context", response_model=CoachingContextOut, tags=["coaching"])
async def get_coaching_context(context: Annotated[CoachingContext, Depends(_context)]):
    return CoachingContextOut.model_validate(context.to_dict())


@router.get("/athletes/{user_id}/coaching-context/text", response_class=PlainTextResponse, tags=["coaching"])
async def get_coaching_context_text(context: Annotated[CoachingContext, Depends(_context)]):
    return format_coaching_context(context)
