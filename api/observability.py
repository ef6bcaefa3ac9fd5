from __future__ import annotations

import contextvars
import logging
import time
from typing import Optional
from uuid import uuid4

from ridecoach.db import get_query_stats


_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def set_request_id(value: Optional[str]):
    return _request_id_var.set(value)


def reset_request_id(token) -> None:
    _request_id_var.reset(token)


def new_request_id() -> str:
    return uuid4().hex


class RequestIdFilter(logging.Filter):
    """Stamp the active request id onto every record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def install_request_id_filter() -> None:
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


def request_log_fields(*, method: str, path: str, status_code: int, duration_ms: float, client_ip: Optional[str]) -> dict[str, object]:
    return {
        "ctx_method": method,
        "ctx_path": path,
        "ctx_status_code": int(status_code),
        "ctx_duration_ms": round(float(duration_ms), 2),
        "ctx_client_ip": client_ip or "",
    }


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


def system_status(samples: int, slow_queries: int) -> tuple[str, str]:
    if samples < 5:
        return "OK", f"Warmup ({samples} samples)"
    if slow_queries > 10:
        return "WARN", "Slow query threshold exceeded"
    return "OK", "Nominal"


def health_payload() -> dict[str, object]:
    stats = get_query_stats()
    status, message = system_status(stats.total, stats.slow)
    return {
        "status": status,
        "message": message,
        "queries": stats.total,
        "slow_queries": stats.slow,
        "p95_ms": stats.p95_ms,
    }
