import os
from logging.config import dictConfig
from typing import Any, Dict, Mapping, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# third-party loggers that are only useful while debugging an integration
_QUIET_LOGGERS = {
    "httpx": "HYPERHIVE_DEBUG_HTTP",
    "httpcore": "HYPERHIVE_DEBUG_HTTP",
    "openai": "HYPERHIVE_DEBUG_HTTP",
    "uvicorn.access": "HYPERHIVE_DEBUG_HTTP",
    "sqlalchemy.engine": "HYPERHIVE_DEBUG_SQL",
}


def _flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "0") == "1"


def build_logging_config(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Logging layout for the API: service loggers at their own level, quiet HTTP/SQL clients.

    ``HYPERHIVE_LOG_LEVEL`` drives the ``hyperhive`` loggers,
    ``HYPERHIVE_TELEMETRY_LOG_LEVEL`` the ``TELEMETRY`` lines (``OFF`` silences them),
    and ``HYPERHIVE_DEBUG_HTTP`` / ``HYPERHIVE_DEBUG_SQL`` open up the client loggers.
    """
    env = os.environ if env is None else env
    level = env.get("HYPERHIVE_LOG_LEVEL", "INFO").upper()
    telemetry_level = env.get("HYPERHIVE_TELEMETRY_LOG_LEVEL", "INFO").upper()

    loggers: Dict[str, Dict[str, Any]] = {
        "hyperhive": {"level": level},
        "hyperhive.telemetry": {"level": "CRITICAL" if telemetry_level == "OFF" else telemetry_level},
    }
    for name, switch in _QUIET_LOGGERS.items():
        if _flag(env, switch):
            loggers[name] = {"level": "INFO" if name == "sqlalchemy.engine" else "DEBUG"}
        else:
            loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": DEFAULT_LOG_FORMAT}},
        "handlers": {"default": {"class": "logging.StreamHandler", "formatter": "default"}},
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": "WARNING"},
    }


def configure_logging() -> None:
    """Configure process-wide logging from HYPERHIVE_* environment flags."""
    dictConfig(build_logging_config())
