"""Request and response models for learner records."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelInputModel(BaseModel):
    """Accepts camelCase or snake_case keys on input, always dumps snake_case."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(validation_alias=to_camel),
        populate_by_name=True,
    )


class LearnerAIProfile(CamelInputModel):
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    goals: List[str] = Field(default_factory=list)
    current_level: str = ""
    learning_style: str = ""
    available_hours_per_week: int = 0
    preferred_learning_time: str = ""
    years_of_experience: str = ""
    preferred_topics: List[str] = Field(default_factory=list)
    weak_areas: List[str] = Field(default_factory=list)


class CreateLearnerRequest(CamelInputModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=100)
    position: str = Field(default="", max_length=100)
    department: str = Field(default="", max_length=100)
    joined_date: Optional[date] = None
    bio: Optional[str] = None
    ai_profile: Optional[LearnerAIProfile] = None


class UpdateLearnerRequest(CamelInputModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    position: Optional[str] = Field(default=None, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)
    joined_date: Optional[date] = None
    bio: Optional[str] = None
    ai_profile: Optional[LearnerAIProfile] = None


class LearnerPayload(BaseModel):
    id: int
    name: str
    email: str
    position: str
    department: str
    joined_date: Optional[date] = None
    bio: Optional[str] = None
    ai_profile: Optional[LearnerAIProfile] = None
    created_at: datetime
    updated_at: datetime


class LearnerListPayload(BaseModel):
    learners: List[LearnerPayload] = Field(default_factory=list)
    total_count: int = 0


__all__ = [
    "CamelInputModel",
    "CreateLearnerRequest",
    "LearnerAIProfile",
    "LearnerListPayload",
    "LearnerPayload",
    "UpdateLearnerRequest",
]
