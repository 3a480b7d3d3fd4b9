"""Learner CRUD endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from .auth import require_authenticated_user
from .db.session import get_session_dependency
from .errors import NotFoundError, ServiceError, internal_error
from .learner_models import CreateLearnerRequest, LearnerListPayload, LearnerPayload, UpdateLearnerRequest
from .repositories.learners import learners

router = APIRouter(
    prefix="/api/learners",
    tags=["learners"],
    dependencies=[Depends(require_authenticated_user)],
)
logger = logging.getLogger(__name__)


@router.get("", response_model=LearnerListPayload)
def list_learners(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    session: Session = Depends(get_session_dependency),
):
    try:
        return learners.list_page(session, page=page, page_size=page_size)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error listing learners")
        return internal_error("get learners", exc)


@router.get("/by-email/{email}", response_model=LearnerPayload)
def get_learner_by_email(email: str, session: Session = Depends(get_session_dependency)):
    learner = learners.get_by_email(session, email)
    if learner is None:
        raise NotFoundError(f"Learner with email {email} not found")
    return learner


@router.get("/{learner_id}", response_model=LearnerPayload)
def get_learner(learner_id: int, session: Session = Depends(get_session_dependency)):
    learner = learners.get(session, learner_id)
    if learner is None:
        raise NotFoundError(f"Learner with ID {learner_id} not found")
    return learner


@router.post("", response_model=LearnerPayload, status_code=status.HTTP_201_CREATED)
def create_learner(request: CreateLearnerRequest, session: Session = Depends(get_session_dependency)):
    try:
        return learners.create(session, request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error creating learner")
        return internal_error("create learner", exc)


@router.put("/{learner_id}", response_model=LearnerPayload)
def update_learner(
    learner_id: int,
    request: UpdateLearnerRequest,
    session: Session = Depends(get_session_dependency),
):
    try:
        return learners.update(session, learner_id, request)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error updating learner %s", learner_id)
        return internal_error("update learner", exc)


@router.delete("/{learner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_learner(learner_id: int, session: Session = Depends(get_session_dependency)) -> Response:
    if not learners.delete(session, learner_id):
        raise NotFoundError(f"Learner with ID {learner_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
