"""Free-form chat with the assistant."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from .auth import require_authenticated_user
from .dependencies import get_llm_client
from .errors import ServiceError, ValidationFailure, internal_error
from .llm_client import LLMClient

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
    dependencies=[Depends(require_authenticated_user)],
)
logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: str = ""


class ChatReply(BaseModel):
    response: str


@router.post("", response_model=ChatReply)
async def chat(request: ChatRequest, llm: Optional[LLMClient] = Depends(get_llm_client)):
    if not request.message.strip():
        raise ValidationFailure("Message cannot be empty")
    if llm is None:
        raise ServiceError("OPENAI_API_KEY must be configured to chat.")
    try:
        reply = await llm.chat(request.message)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error processing chat message")
        return internal_error("process chat message", exc)
    return ChatReply(response=reply)


__all__ = ["ChatReply", "ChatRequest", "router"]
