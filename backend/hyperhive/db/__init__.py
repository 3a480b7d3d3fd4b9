"""Database utilities for HyperHive."""

from .base import Base
from .session import dispose_engine, get_engine, get_session_dependency, session_scope

__all__ = [
    "Base",
    "dispose_engine",
    "get_engine",
    "get_session_dependency",
    "session_scope",
]
