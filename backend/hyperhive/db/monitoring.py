"""Connection pool instrumentation for the HyperHive database engine."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Dict

from sqlalchemy import event
from sqlalchemy.engine import Engine

from ..telemetry import emit_event


@dataclass
class PoolCounters:
    connects: int = 0
    checkouts: int = 0
    checkins: int = 0
    last_emit: float = 0.0

    def as_dict(self) -> Dict[str, int]:
        return {"connects": self.connects, "checkouts": self.checkouts, "checkins": self.checkins}


_COUNTERS: Dict[int, PoolCounters] = {}
_EMIT_INTERVAL = float(os.getenv("HYPERHIVE_DB_TELEMETRY_INTERVAL", "30"))


def instrument_engine(engine: Engine) -> None:
    """Count pool connect/checkout/checkin events and emit throttled snapshots."""
    key = id(engine)
    if key in _COUNTERS:
        return
    counters = PoolCounters()
    _COUNTERS[key] = counters

    def _bump(field: str, reason: str) -> None:
        setattr(counters, field, getattr(counters, field) + 1)
        now = time.time()
        if _EMIT_INTERVAL > 0 and (now - counters.last_emit) < _EMIT_INTERVAL:
            return
        counters.last_emit = now
        emit_event("db_pool_status", reason=reason, status=pool_status(engine), **counters.as_dict())

    event.listen(engine, "connect", lambda *_: _bump("connects", "connect"))
    event.listen(engine, "checkout", lambda *_: _bump("checkouts", "checkout"))
    event.listen(engine, "checkin", lambda *_: _bump("checkins", "checkin"))


def get_pool_snapshot(engine: Engine) -> Dict[str, object]:
    counters = _COUNTERS.get(id(engine)) or PoolCounters()
    return {"status": pool_status(engine), **counters.as_dict()}


def forget_engine(engine: Engine) -> None:
    _COUNTERS.pop(id(engine), None)


def pool_status(engine: Engine) -> str:
    try:
        return engine.pool.status()
    except Exception as exc:  # noqa: BLE001
        return f"unavailable: {exc}"


__all__ = ["forget_engine", "get_pool_snapshot", "instrument_engine", "pool_status"]
