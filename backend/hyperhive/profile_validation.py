"""Validate a learner's claimed skills against their GitHub activity."""

from __future__ import annotations

import json
import logging
from typing import Optional

from openai import OpenAIError
from sqlalchemy.orm import Session

from .config import Settings
from .db.base import utcnow
from .errors import ValidationFailure
from .github_client import GitHubService
from .github_models import DeveloperStrongAreas, GitHubAnalysisRequest
from .learner_models import LearnerAIProfile
from .llm_client import LLMClient, LLMResponseError
from .repositories.learners import learners, parse_ai_profile
from .skill_matcher import compare_skills, extract_github_skills
from .telemetry import emit_event
from .validation_models import (
    GitHubProfileSummary,
    ProfileValidationPayload,
    SkillsComparison,
    ValidationAssessment,
)
from .validation_scoring import RECOMMENDATION_COUNT, clamp_score, fallback_validation, validation_level

logger = logging.getLogger(__name__)

TOP_TECHNOLOGIES = 10


def build_validation_prompt(
    profile: LearnerAIProfile,
    analysis: DeveloperStrongAreas,
    comparison: SkillsComparison,
) -> str:
    languages = ", ".join(f"{usage.language} ({usage.percentage:.1f}%)" for usage in analysis.languages)
    technologies = ", ".join(usage.technology for usage in analysis.technologies[:TOP_TECHNOLOGIES])
    domains = ", ".join(area.area for area in analysis.domain_areas)
    return f"""
You are an expert at validating software engineer profiles. Analyze the following data and provide a validation score.

LEARNER'S CLAIMED PROFILE:
{json.dumps(profile.model_dump(mode="json"), indent=2)}

GITHUB PROFILE ANALYSIS:
- Username: {analysis.developer_username}
- Total Commits: {analysis.total_commits}
- Total Pull Requests: {analysis.total_pull_requests}
- Lines Added: {analysis.total_lines_added}
- Lines Deleted: {analysis.total_lines_deleted}

LANGUAGES USED:
{languages}

TECHNOLOGIES:
{technologies}

DOMAIN AREAS:
{domains}

SKILLS COMPARISON:
- Claimed Skills: {", ".join(comparison.claimed_skills)}
- GitHub Skills/Languages: {", ".join(comparison.github_skills)}
- Matched Skills: {", ".join(comparison.matched_skills)}
- Unverified Skills: {", ".join(comparison.unverified_skills)}
- Match Percentage: {comparison.match_percentage}%

TASK:
1. Provide a validation score from 0-100 based on how well the claimed profile matches GitHub activity
2. Consider: skill matches, GitHub activity level (commits, PRs), technology usage
3. Provide brief analysis (2-3 sentences)
4. Give 3 specific recommendations

Return ONLY valid JSON in this format:
{{
  "score": 85,
  "analysis": "Brief analysis here...",
  "recommendations": [
    "Recommendation 1",
    "Recommendation 2",
    "Recommendation 3"
  ]
}}
"""


class ProfileValidationService:
    def __init__(
        self,
        session: Session,
        github: GitHubService,
        llm: Optional[LLMClient],
        settings: Settings,
    ) -> None:
        self._session = session
        self._github = github
        self._llm = llm
        self._settings = settings

    async def validate(self, learner_id: int, github_username: str) -> ProfileValidationPayload:
        owner = self._settings.require("github_repo_owner")
        repository = self._settings.require("github_repo_name")
        logger.info(
            "Starting profile validation for learner %s with GitHub user %s in %s/%s",
            learner_id,
            github_username,
            owner,
            repository,
        )

        learner = learners.require_model(self._session, learner_id)
        profile = parse_ai_profile(learner)
        if profile is None or not profile.skills:
            raise ValidationFailure("Learner has no skills claimed in their profile")

        analysis = await self._github.analyze(
            GitHubAnalysisRequest(owner=owner, repository=repository, username=github_username)
        )
        comparison = compare_skills(profile.skills, extract_github_skills(analysis))
        assessment, source = await self._assess(profile, analysis, comparison)

        score = clamp_score(assessment.score)
        emit_event(
            "profile_validated",
            learner_id=learner_id,
            github_username=github_username,
            score=score,
            match_percentage=comparison.match_percentage,
            source=source,
        )
        logger.info("Profile validation completed for learner %s. Score: %s (%s)", learner_id, score, source)

        return ProfileValidationPayload(
            learner_id=learner_id,
            github_username=github_username,
            validation_score=score,
            validation_level=validation_level(score),
            github_profile=GitHubProfileSummary(
                username=github_username,
                public_repos=analysis.total_commits,
                top_languages=[usage.language for usage in analysis.languages],
                topic_interests=[usage.technology for usage in analysis.technologies[:TOP_TECHNOLOGIES]],
                total_commits=analysis.total_commits,
            ),
            skills_comparison=comparison,
            ai_analysis=assessment.analysis,
            recommendations=assessment.recommendations[:RECOMMENDATION_COUNT],
            validated_at=utcnow(),
        )

    async def _assess(
        self,
        profile: LearnerAIProfile,
        analysis: DeveloperStrongAreas,
        comparison: SkillsComparison,
    ) -> tuple[ValidationAssessment, str]:
        if self._llm is None:
            logger.warning("No LLM client configured; using rule-based validation")
            return fallback_validation(comparison, analysis), "rule_based"

        prompt = build_validation_prompt(profile, analysis, comparison)
        try:
            return await self._llm.generate_validation_analysis(prompt), "llm"
        except (LLMResponseError, OpenAIError) as exc:
            logger.warning("LLM validation failed, falling back to rule-based scoring: %s", exc)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected LLM validation failure, falling back to rule-based scoring")
        return fallback_validation(comparison, analysis), "rule_based"


__all__ = ["ProfileValidationService", "build_validation_prompt"]
