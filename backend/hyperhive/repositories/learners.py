"""Database-backed learner repository."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db.base import utcnow
from ..db.models import LearnerModel
from ..errors import ConflictError, NotFoundError
from ..learner_models import (
    CreateLearnerRequest,
    LearnerAIProfile,
    LearnerListPayload,
    LearnerPayload,
    UpdateLearnerRequest,
)

logger = logging.getLogger(__name__)


def parse_ai_profile(model: LearnerModel) -> Optional[LearnerAIProfile]:
    """Decode the stored profile blob, logging and returning None when it is unusable."""
    if not model.ai_profile:
        return None
    try:
        return LearnerAIProfile.model_validate(model.ai_profile)
    except ValidationError as exc:
        logger.warning("Failed to parse AI profile for learner %s: %s", model.id, exc)
        return None


class LearnerRepository:
    def get_model(self, session: Session, learner_id: int) -> LearnerModel | None:
        return session.get(LearnerModel, learner_id)

    def require_model(self, session: Session, learner_id: int) -> LearnerModel:
        model = self.get_model(session, learner_id)
        if model is None:
            raise NotFoundError(f"Learner with ID {learner_id} not found")
        return model

    def get(self, session: Session, learner_id: int) -> LearnerPayload | None:
        model = self.get_model(session, learner_id)
        return self._to_payload(model) if model is not None else None

    def get_by_email(self, session: Session, email: str) -> LearnerPayload | None:
        model = self._find_by_email(session, email)
        return self._to_payload(model) if model is not None else None

    def create(self, session: Session, request: CreateLearnerRequest) -> LearnerPayload:
        if self._find_by_email(session, request.email) is not None:
            raise ConflictError(f"Learner with email {request.email} already exists")

        model = LearnerModel(
            name=request.name,
            email=request.email,
            position=request.position,
            department=request.department,
            joined_date=request.joined_date,
            bio=request.bio,
            ai_profile=request.ai_profile.model_dump(mode="json") if request.ai_profile else None,
        )
        session.add(model)
        session.flush()
        logger.info("Created learner with ID %s", model.id)
        return self._to_payload(model)

    def update(self, session: Session, learner_id: int, request: UpdateLearnerRequest) -> LearnerPayload:
        """Apply the non-empty fields of ``request``; ``bio`` may be cleared with an empty string."""
        model = self.require_model(session, learner_id)

        if request.name:
            model.name = request.name
        if request.email:
            existing = self._find_by_email(session, request.email)
            if existing is not None and existing.id != learner_id:
                raise ConflictError(f"Email {request.email} is already taken")
            model.email = request.email
        if request.position:
            model.position = request.position
        if request.department:
            model.department = request.department
        if request.joined_date is not None:
            model.joined_date = request.joined_date
        if request.bio is not None:
            model.bio = request.bio
        if request.ai_profile is not None:
            model.ai_profile = request.ai_profile.model_dump(mode="json")

        model.updated_at = utcnow()
        session.flush()
        logger.info("Updated learner with ID %s", learner_id)
        return self._to_payload(model)

    def list_page(self, session: Session, page: int = 1, page_size: int = 10) -> LearnerListPayload:
        page = max(page, 1)
        page_size = max(page_size, 1)
        total = session.execute(select(func.count()).select_from(LearnerModel)).scalar_one()
        stmt = (
            select(LearnerModel)
            .order_by(LearnerModel.created_at.desc(), LearnerModel.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        models = session.execute(stmt).scalars().all()
        return LearnerListPayload(learners=[self._to_payload(model) for model in models], total_count=total)

    def delete(self, session: Session, learner_id: int) -> bool:
        model = self.get_model(session, learner_id)
        if model is None:
            return False
        session.delete(model)
        session.flush()
        logger.info("Deleted learner with ID %s", learner_id)
        return True

    def _find_by_email(self, session: Session, email: str) -> LearnerModel | None:
        stmt = select(LearnerModel).where(LearnerModel.email == email)
        return session.execute(stmt).scalar_one_or_none()

    def _to_payload(self, model: LearnerModel) -> LearnerPayload:
        return LearnerPayload(
            id=model.id,
            name=model.name,
            email=model.email,
            position=model.position,
            department=model.department,
            joined_date=model.joined_date,
            bio=model.bio,
            ai_profile=parse_ai_profile(model),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


learners = LearnerRepository()

__all__ = ["LearnerRepository", "learners", "parse_ai_profile"]
