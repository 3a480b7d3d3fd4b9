import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from . import auth_routes, chat_routes, github_routes, growth_plan_routes, learner_routes, quiz_routes, validation_routes
from .config import get_settings
from .db.monitoring import get_pool_snapshot
from .db.session import get_engine
from .errors import register_error_handlers
from .logging_config import configure_logging


configure_logging()
logger = logging.getLogger(__name__)
settings_snapshot = get_settings()

app = FastAPI(title="HyperHive Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings_snapshot.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

for module in (
    auth_routes,
    learner_routes,
    quiz_routes,
    github_routes,
    growth_plan_routes,
    validation_routes,
    chat_routes,
):
    app.include_router(module.router)

logger.info("OpenAI API key configured: %s", bool(settings_snapshot.openai_api_key))
logger.info("GitHub token configured: %s", bool(settings_snapshot.github_access_token))
logger.info("Authentication enabled: %s", settings_snapshot.auth_enabled)


@app.get("/healthz")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz/database")
def database_health() -> Dict[str, Any]:
    try:
        engine = get_engine()
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Database health check failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"status": "ok", "pool": get_pool_snapshot(engine)}
