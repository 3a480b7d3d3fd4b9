"""Growth plan models shared by the planner, the LLM client and the routes."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .learner_models import CamelInputModel


class SkillGap(CamelInputModel):
    skill_name: str
    current_proficiency: str = ""
    target_proficiency: str = ""
    priority: str = ""
    reasoning: str = ""


class LearningPhase(CamelInputModel):
    phase_number: int = 0
    title: str = ""
    description: str = ""
    duration_weeks: int = 0
    skills_to_cover: List[str] = Field(default_factory=list)
    learning_objectives: List[str] = Field(default_factory=list)
    practical_projects: List[str] = Field(default_factory=list)
    success_metrics: str = ""


class RecommendedResource(CamelInputModel):
    title: str = ""
    type: str = ""
    url: str = ""
    provider: str = ""
    description: str = ""
    skills_covered: List[str] = Field(default_factory=list)
    difficulty: str = ""
    is_free: bool = False
    estimated_hours: Optional[int] = None


class GrowthPlanDraft(CamelInputModel):
    """Plan body as authored by the LLM or the fallback planner."""

    overview: str = ""
    estimated_duration_months: int = 0
    learning_phases: List[LearningPhase] = Field(default_factory=list)
    recommended_resources: List[RecommendedResource] = Field(default_factory=list)
    key_milestones: List[str] = Field(default_factory=list)
    success_criteria: str = ""


class GenerateGrowthPlanRequest(CamelInputModel):
    learner_id: int


class GrowthPlanPayload(BaseModel):
    learner_id: int
    learner_name: str
    current_level: str
    target_level: str
    estimated_duration_months: int
    overview: str
    skill_gaps: List[SkillGap] = Field(default_factory=list)
    learning_phases: List[LearningPhase] = Field(default_factory=list)
    recommended_resources: List[RecommendedResource] = Field(default_factory=list)
    key_milestones: List[str] = Field(default_factory=list)
    success_criteria: str = ""
    generated_at: datetime


__all__ = [
    "GenerateGrowthPlanRequest",
    "GrowthPlanDraft",
    "GrowthPlanPayload",
    "LearningPhase",
    "RecommendedResource",
    "SkillGap",
]
