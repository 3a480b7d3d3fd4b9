"""Models describing a learner profile validated against GitHub activity."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .learner_models import CamelInputModel


class SkillsComparison(BaseModel):
    """Claimed skills partitioned against GitHub-derived skills."""

    model_config = ConfigDict(frozen=True)

    claimed_skills: List[str] = Field(default_factory=list)
    github_skills: List[str] = Field(default_factory=list)
    matched_skills: List[str] = Field(default_factory=list)
    unverified_skills: List[str] = Field(default_factory=list)
    additional_github_skills: List[str] = Field(default_factory=list)
    match_percentage: float = 0.0


class ValidationAssessment(CamelInputModel):
    """Score, narrative and recommendations from either the LLM or the rule-based scorer."""

    score: int = 0
    analysis: str = ""
    recommendations: List[str] = Field(default_factory=list)


class GitHubProfileSummary(BaseModel):
    username: str = ""
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    top_languages: List[str] = Field(default_factory=list)
    topic_interests: List[str] = Field(default_factory=list)
    bio: str = ""
    total_commits: int = 0
    years_active: int = 0


class ValidateProfileRequest(CamelInputModel):
    learner_id: int
    github_username: str = ""


class ProfileValidationPayload(BaseModel):
    learner_id: int
    github_username: str
    validation_score: int
    validation_level: str
    github_profile: GitHubProfileSummary
    skills_comparison: SkillsComparison
    ai_analysis: str
    recommendations: List[str] = Field(default_factory=list)
    validated_at: datetime


__all__ = [
    "GitHubProfileSummary",
    "ProfileValidationPayload",
    "SkillsComparison",
    "ValidateProfileRequest",
    "ValidationAssessment",
]
