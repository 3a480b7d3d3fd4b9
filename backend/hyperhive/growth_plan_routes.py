"""Growth plan endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .auth import require_authenticated_user
from .db.session import get_session_dependency
from .dependencies import get_llm_client
from .errors import ServiceError, internal_error
from .growth_plan import GrowthPlanService
from .growth_plan_models import GenerateGrowthPlanRequest, GrowthPlanPayload
from .llm_client import LLMClient

router = APIRouter(
    prefix="/api/growth-plan",
    tags=["growth-plan"],
    dependencies=[Depends(require_authenticated_user)],
)
logger = logging.getLogger(__name__)


def get_growth_plan_service(
    session: Session = Depends(get_session_dependency),
    llm: Optional[LLMClient] = Depends(get_llm_client),
) -> GrowthPlanService:
    return GrowthPlanService(session, llm)


async def _generate(service: GrowthPlanService, learner_id: int):
    try:
        return await service.generate(learner_id)
    except ServiceError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error generating growth plan for learner %s", learner_id)
        return internal_error("generate growth plan", exc)


@router.post("/generate", response_model=GrowthPlanPayload)
async def generate_growth_plan(
    request: GenerateGrowthPlanRequest,
    service: GrowthPlanService = Depends(get_growth_plan_service),
):
    return await _generate(service, request.learner_id)


@router.get("/generate/{learner_id}", response_model=GrowthPlanPayload)
async def generate_growth_plan_by_path(
    learner_id: int,
    service: GrowthPlanService = Depends(get_growth_plan_service),
):
    return await _generate(service, learner_id)


__all__ = ["get_growth_plan_service", "router"]
