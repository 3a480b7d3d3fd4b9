"""FastAPI dependency providers shared by the routers."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from fastapi import Depends

from .config import Settings, get_settings
from .github_client import GitHubClient, GitHubService
from .llm_client import LLMClient

logger = logging.getLogger(__name__)


def get_llm_client(settings: Settings = Depends(get_settings)) -> Optional[LLMClient]:
    """Return an LLM client, or None when no OpenAI key is configured."""
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; LLM-backed features will degrade or fail")
        return None
    return LLMClient(settings)


async def get_github_service(settings: Settings = Depends(get_settings)) -> AsyncIterator[GitHubService]:
    client = GitHubClient(settings)
    try:
        yield GitHubService(client)
    finally:
        await client.aclose()


__all__ = ["get_github_service", "get_llm_client"]
