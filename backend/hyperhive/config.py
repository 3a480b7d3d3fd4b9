import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    openai_base_url: str = Field("https://api.openai.com/v1", alias="OPENAI_BASE_URL")
    openai_model: str = Field("gpt-4o-mini", alias="HYPERHIVE_OPENAI_MODEL")
    github_access_token: Optional[str] = Field(None, alias="GITHUB_ACCESS_TOKEN")
    github_repo_owner: Optional[str] = Field(None, alias="GITHUB_REPO_OWNER")
    github_repo_name: Optional[str] = Field(None, alias="GITHUB_REPO_NAME")
    github_api_url: str = Field("https://api.github.com", alias="GITHUB_API_URL")
    http_timeout_seconds: float = Field(300.0, alias="HYPERHIVE_HTTP_TIMEOUT_SECONDS")
    database_url: Optional[str] = Field(None, alias="HYPERHIVE_DATABASE_URL")
    database_pool_size: int = Field(10, alias="HYPERHIVE_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="HYPERHIVE_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="HYPERHIVE_DATABASE_ECHO")
    jwt_secret_key: Optional[str] = Field(None, alias="HYPERHIVE_JWT_SECRET_KEY")
    jwt_issuer: str = Field("HyperHiveBackend", alias="HYPERHIVE_JWT_ISSUER")
    jwt_audience: str = Field("HyperHiveBackend", alias="HYPERHIVE_JWT_AUDIENCE")
    jwt_expiry_minutes: int = Field(60, alias="HYPERHIVE_JWT_EXPIRY_MINUTES")
    auth_enabled: bool = Field(False, alias="HYPERHIVE_AUTH_ENABLED")
    quiz_single_attempt: bool = Field(True, alias="HYPERHIVE_QUIZ_SINGLE_ATTEMPT")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:4200"], alias="HYPERHIVE_CORS_ORIGINS")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True

    def require(self, field: str) -> str:
        """Return a configured string setting or fail naming its environment variable."""
        value = getattr(self, field)
        if isinstance(value, str) and value.strip():
            return value.strip()
        alias = type(self).model_fields[field].alias or field.upper()
        raise RuntimeError(f"{alias} must be configured.")


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()  # type: ignore[arg-type]
        if settings.openai_api_key and not os.getenv("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        return settings
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
