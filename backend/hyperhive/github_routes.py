"""GitHub activity endpoints: raw commits, pull requests and strong-area analysis."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from starlette.responses import JSONResponse

from .dependencies import get_github_service
from .errors import ServiceError, ValidationFailure
from .github_client import GitHubService
from .github_models import DeveloperStrongAreas, GitHubAnalysisRequest, GitHubCommit, GitHubPullRequest

router = APIRouter(prefix="/api/github", tags=["github"])
logger = logging.getLogger(__name__)

MISSING_PARAMETERS_MESSAGE = "Owner, Repository, and Username are required"


def _server_error(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})


def _query_request(
    owner: str = "",
    repository: str = "",
    username: str = "",
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> GitHubAnalysisRequest:
    if not owner.strip() or not repository.strip() or not username.strip():
        raise ValidationFailure(MISSING_PARAMETERS_MESSAGE)
    return GitHubAnalysisRequest(owner=owner, repository=repository, username=username, since=since, until=until)


@router.post("/analyze-developer", response_model=DeveloperStrongAreas)
async def analyze_developer(
    request: GitHubAnalysisRequest,
    service: GitHubService = Depends(get_github_service),
):
    for value, label in ((request.owner, "Owner"), (request.repository, "Repository"), (request.username, "Username")):
        if not value.strip():
            raise ValidationFailure(f"{label} is required")
    try:
        return await service.analyze(request)
    except ServiceError:
        raise
    except Exception:  # noqa: BLE001
        logger.exception("Error analyzing developer strong areas")
        return _server_error("An error occurred while analyzing developer data")


@router.get("/commits", response_model=List[GitHubCommit])
async def get_commits(
    request: GitHubAnalysisRequest = Depends(_query_request),
    service: GitHubService = Depends(get_github_service),
):
    try:
        return await service.get_commits(request)
    except Exception:  # noqa: BLE001
        logger.exception("Error fetching commits")
        return _server_error("An error occurred while fetching commits")


@router.get("/pull-requests", response_model=List[GitHubPullRequest])
async def get_pull_requests(
    request: GitHubAnalysisRequest = Depends(_query_request),
    service: GitHubService = Depends(get_github_service),
):
    try:
        return await service.get_pull_requests(request)
    except Exception:  # noqa: BLE001
        logger.exception("Error fetching pull requests")
        return _server_error("An error occurred while fetching pull requests")


__all__ = ["router"]
