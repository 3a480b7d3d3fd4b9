"""Quiz generation, submission and history endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import require_authenticated_user
from .config import Settings, get_settings
from .db.session import get_session_dependency
from .dependencies import get_llm_client
from .errors import ServiceError, internal_error
from .llm_client import LLMClient
from .quiz_models import (
    GenerateQuizPayload,
    GenerateQuizRequest,
    LearnerQuizStatistics,
    QuizAttemptSummary,
    QuizDetailsPayload,
    SubmitQuizPayload,
    SubmitQuizRequest,
)
from .quiz_service import QuizService

router = APIRouter(
    prefix="/api/quiz",
    tags=["quiz"],
    dependencies=[Depends(require_authenticated_user)],
)
logger = logging.getLogger(__name__)


def get_quiz_service(
    session: Session = Depends(get_session_dependency),
    llm: Optional[LLMClient] = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> QuizService:
    return QuizService(session, llm, enforce_single_attempt=settings.quiz_single_attempt)


@router.post("/generate", response_model=GenerateQuizPayload)
async def generate_quiz(request: GenerateQuizRequest, service: QuizService = Depends(get_quiz_service)):
    try:
        return await service.generate_quiz(request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error generating quiz for learner %s", request.learner_id)
        return internal_error("generate quiz", exc)


@router.post("/submit", response_model=SubmitQuizPayload)
async def submit_quiz(request: SubmitQuizRequest, service: QuizService = Depends(get_quiz_service)):
    try:
        return await service.submit_quiz(request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error submitting quiz %s", request.quiz_id)
        return internal_error("submit quiz", exc)


@router.get("/attempt/{attempt_id}", response_model=SubmitQuizPayload)
def get_attempt_results(attempt_id: int, service: QuizService = Depends(get_quiz_service)):
    try:
        return service.get_attempt_results(attempt_id)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error retrieving quiz attempt %s", attempt_id)
        return internal_error("retrieve quiz attempt results", exc)


@router.get("/learner/{learner_id}/attempts", response_model=List[QuizAttemptSummary])
def list_learner_attempts(learner_id: int, service: QuizService = Depends(get_quiz_service)):
    try:
        return service.list_learner_attempts(learner_id)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error retrieving quiz attempts for learner %s", learner_id)
        return internal_error("retrieve quiz attempts", exc)


@router.get("/learner/{learner_id}/statistics", response_model=LearnerQuizStatistics)
def learner_statistics(learner_id: int, service: QuizService = Depends(get_quiz_service)):
    try:
        return service.learner_statistics(learner_id)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error retrieving quiz statistics for learner %s", learner_id)
        return internal_error("retrieve quiz statistics", exc)


@router.get("/{quiz_id}", response_model=QuizDetailsPayload)
def quiz_details(quiz_id: int, service: QuizService = Depends(get_quiz_service)):
    try:
        return service.quiz_details(quiz_id)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error retrieving quiz %s", quiz_id)
        return internal_error("retrieve quiz details", exc)


__all__ = ["get_quiz_service", "router"]
