from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, frozen=True)


class ProfileOut(_CamelModel):
    ftp: int | float
    resting_hr: Optional[int] = Field(default=None, alias="restingHR")
    max_hr: Optional[int] = Field(default=None, alias="maxHR")
    weekly_hours_target: int | float
    goals: Optional[str] = None


class LoadOut(_CamelModel):
    weekly_tss: list[int] = Field(alias="weeklyTSS")
    weekly_hours: list[float]
    ctl: int = Field(ge=0)
    atl: int = Field(ge=0)
    tsb: int
    load_trend: Literal["building", "maintaining", "declining", "recovering"]


class PerformanceOut(_CamelModel):
    avg_weighted_power: Optional[int] = None
    best_20min_power: Optional[int] = Field(default=None, alias="best20MinPower")
    power_trend: Literal["improving", "declining", "stable"]


class PatternsOut(_CamelModel):
    avg_rides_per_week: float
    avg_ride_duration: int
    preferred_days: list[str]
    days_since_last_ride: int
    days_since_rest_day: int = Field(ge=0, le=14)
    consistency_score: int = Field(ge=0, le=100)


class RideSummaryOut(_CamelModel):
    date: str
    duration: int
    tss: int | float
    type: Literal["easy", "endurance", "tempo", "threshold", "vo2max", "race"]
    title: Optional[str] = None


class CoachingContextOut(_CamelModel):
    profile: ProfileOut
    load: LoadOut
    performance: PerformanceOut
    patterns: PatternsOut
    recent_rides: list[RideSummaryOut]
    today: str
    day_of_week: str


class HealthOut(BaseModel):
    status: str
    message: str
    queries: int
    slow_queries: int
    p95_ms: float
