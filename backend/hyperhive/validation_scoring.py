"""Rule-based profile validation score used when the LLM path is unavailable."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List

from .github_models import DeveloperStrongAreas
from .validation_models import SkillsComparison, ValidationAssessment

RECOMMENDATION_COUNT = 3
ACTIVE_COMMIT_THRESHOLD = 50
KEEP_LEARNING = "Keep learning and building projects in your areas of interest"


def clamp_score(score: int) -> int:
    return max(0, min(int(score), 100))


def rule_based_score(comparison: SkillsComparison, analysis: DeveloperStrongAreas) -> int:
    """Skill match (40) + commit activity (30) + technology breadth (15) + domain coverage (15)."""
    score = int(comparison.match_percentage * 0.4)
    score += min(analysis.total_commits // 10, 30)
    score += min(len(analysis.technologies), 15)
    score += min(len(analysis.domain_areas) * 3, 15)
    return clamp_score(score)


def validation_level(score: int) -> str:
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Fair"
    return "Needs Improvement"


def build_recommendations(comparison: SkillsComparison, analysis: DeveloperStrongAreas) -> List[str]:
    recommendations: List[str] = []
    if comparison.unverified_skills:
        showcase = ", ".join(comparison.unverified_skills[:3])
        recommendations.append(f"Create public projects showcasing: {showcase}")
    if comparison.additional_github_skills:
        extra = ", ".join(comparison.additional_github_skills[:3])
        recommendations.append(f"Consider adding these skills to your profile: {extra}")
    if analysis.total_commits < ACTIVE_COMMIT_THRESHOLD:
        recommendations.append(
            "Increase your GitHub activity by contributing to open-source projects or creating personal projects"
        )
    else:
        recommendations.append("Continue maintaining consistent GitHub activity to strengthen your profile")

    while len(recommendations) < RECOMMENDATION_COUNT:
        recommendations.append(KEEP_LEARNING)
    return recommendations[:RECOMMENDATION_COUNT]


def _whole_percent(value: float) -> str:
    return str(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def fallback_validation(comparison: SkillsComparison, analysis: DeveloperStrongAreas) -> ValidationAssessment:
    score = rule_based_score(comparison, analysis)
    alignment = "good" if score >= 70 else "moderate"
    return ValidationAssessment(
        score=score,
        analysis=(
            f"Based on {analysis.total_commits} commits and {_whole_percent(comparison.match_percentage)}% "
            f"skill match, the profile shows {alignment} alignment with GitHub activity."
        ),
        recommendations=build_recommendations(comparison, analysis),
    )


__all__ = [
    "RECOMMENDATION_COUNT",
    "build_recommendations",
    "clamp_score",
    "fallback_validation",
    "rule_based_score",
    "validation_level",
]
