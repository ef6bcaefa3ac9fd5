"""Engine and session factory for the ride store, plus statement timings for /health."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from ridecoach.config import get_database_url

SLOW_QUERY_MS = 250.0
TIMING_WINDOW = 1000

_timings_ms: deque[float] = deque(maxlen=TIMING_WINDOW)


@dataclass(frozen=True)
class QueryStats:
    total: int = 0
    slow: int = 0
    p95_ms: float = 0.0


def record_query_time(elapsed_ms: float) -> None:
    _timings_ms.append(elapsed_ms)


def _start_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("ridecoach_started", []).append(time.perf_counter())


def _stop_timer(conn, cursor, statement, parameters, context, executemany):
    started = conn.info["ridecoach_started"].pop()
    record_query_time((time.perf_counter() - started) * 1000)


@lru_cache(maxsize=1)
def get_engine():
    engine = create_engine(get_database_url(), pool_pre_ping=True)
    event.listen(engine, "before_cursor_execute", _start_timer)
    event.listen(engine, "after_cursor_execute", _stop_timer)
    return engine


@lru_cache(maxsize=1)
def get_session_factory():
    return sessionmaker(bind=get_engine(), autoflush=False)


def get_query_stats() -> QueryStats:
    """Count, slow count and p95 over the last TIMING_WINDOW statements."""
    if not _timings_ms:
        return QueryStats()
    ordered = sorted(_timings_ms)
    rank = min(len(ordered) - 1, int(len(ordered) * 0.95))
    return QueryStats(
        total=len(ordered),
        slow=sum(1 for ms in ordered if ms > SLOW_QUERY_MS),
        p95_ms=round(ordered[rank], 2),
    )
