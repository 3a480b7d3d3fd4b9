"""Profile validation endpoints: claimed skills checked against GitHub activity."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import require_authenticated_user
from .config import Settings, get_settings
from .db.session import get_session_dependency
from .dependencies import get_github_service, get_llm_client
from .errors import ServiceError, internal_error
from .github_client import GitHubService
from .llm_client import LLMClient
from .profile_validation import ProfileValidationService
from .validation_models import ProfileValidationPayload, ValidateProfileRequest

router = APIRouter(
    prefix="/api/profile-validation",
    tags=["profile-validation"],
    dependencies=[Depends(require_authenticated_user)],
)
logger = logging.getLogger(__name__)


def get_validation_service(
    session: Session = Depends(get_session_dependency),
    github: GitHubService = Depends(get_github_service),
    llm: Optional[LLMClient] = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> ProfileValidationService:
    return ProfileValidationService(session, github, llm, settings)


async def _validate(service: ProfileValidationService, learner_id: int, github_username: str):
    logger.info("Validating profile for learner %s with GitHub username %s", learner_id, github_username)
    try:
        return await service.validate(learner_id, github_username)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error validating learner profile")
        return internal_error("validate profile", exc)


@router.post("/validate", response_model=ProfileValidationPayload)
async def validate_profile(
    request: ValidateProfileRequest,
    service: ProfileValidationService = Depends(get_validation_service),
):
    return await _validate(service, request.learner_id, request.github_username)


@router.get("/validate/{learner_id}/{github_username}", response_model=ProfileValidationPayload)
async def validate_profile_by_path(
    learner_id: int,
    github_username: str,
    service: ProfileValidationService = Depends(get_validation_service),
):
    return await _validate(service, learner_id, github_username)


__all__ = ["get_validation_service", "router"]
