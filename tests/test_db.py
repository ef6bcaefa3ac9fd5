"""Tests for engine setup and query timing stats."""

from __future__ import annotations

from collections import deque

from sqlalchemy import text

import ridecoach.db as db_mod
from ridecoach.db import SLOW_QUERY_MS, get_engine, get_query_stats, get_session_factory, record_query_time


def test_executed_statements_are_timed(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'stats.db'}")
    monkeypatch.setattr(db_mod, "_timings_ms", deque(maxlen=db_mod.TIMING_WINDOW))
    get_engine.cache_clear()
    get_session_factory.cache_clear()
    try:
        with get_session_factory()() as session:
            for _ in range(3):
                session.execute(text("select 1"))
        stats = get_query_stats()
        assert stats.total >= 3
        assert stats.slow == 0
        assert stats.p95_ms >= 0
    finally:
        get_engine.cache_clear()
        get_session_factory.cache_clear()


def test_slow_statements_and_p95(monkeypatch):
    monkeypatch.setattr(db_mod, "_timings_ms", deque(maxlen=db_mod.TIMING_WINDOW))
    for ms in range(1, 20):
        record_query_time(float(ms))
    record_query_time(SLOW_QUERY_MS + 100)
    stats = get_query_stats()
    assert stats.total == 20
    assert stats.slow == 1
    assert stats.p95_ms == SLOW_QUERY_MS + 100


def test_timing_window_keeps_latest_statements(monkeypatch):
    monkeypatch.setattr(db_mod, "_timings_ms", deque(maxlen=3))
    for ms in (900.0, 1.0, 2.0, 3.0):
        record_query_time(ms)
    assert get_query_stats().total == 3
    assert get_query_stats().slow == 0


def test_no_statements_yet(monkeypatch):
    monkeypatch.setattr(db_mod, "_timings_ms", deque())
    assert get_query_stats() == db_mod.QueryStats()
