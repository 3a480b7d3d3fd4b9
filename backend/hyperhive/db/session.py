"""Lazily built engine and per-request sessions for the HyperHive tables."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from ..config import Settings, get_settings
from .monitoring import forget_engine, instrument_engine

_engine: Optional[Engine] = None
_sessions: Optional[sessionmaker[Session]] = None


def engine_options(settings: Settings) -> Dict[str, Any]:
    """``create_engine`` keyword arguments; pool sizing only applies to server databases."""
    options: Dict[str, Any] = {"echo": settings.database_echo, "pool_pre_ping": True}
    if settings.require("database_url").startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
    return options


def get_engine() -> Engine:
    global _engine, _sessions
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(settings.require("database_url"), **engine_options(settings))
        instrument_engine(_engine)
        _sessions = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """One unit of work: commit on success, roll back on error, always close."""
    get_engine()
    assert _sessions is not None
    session = _sessions()
    try:
        yield session
        session.commit()
    except Exception:  # noqa: BLE001
        session.rollback()
        raise
    finally:
        session.close()


def get_session_dependency() -> Iterator[Session]:
    with session_scope() as session:
        yield session


def dispose_engine() -> None:
    global _engine, _sessions
    if _engine is not None:
        forget_engine(_engine)
        _engine.dispose()
    _engine = None
    _sessions = None


__all__ = [
    "dispose_engine",
    "engine_options",
    "get_engine",
    "get_session_dependency",
    "session_scope",
]
