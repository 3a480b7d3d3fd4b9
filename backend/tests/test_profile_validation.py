from __future__ import annotations

import asyncio

import pytest

from hyperhive.config import get_settings
from hyperhive.errors import NotFoundError, ValidationFailure
from hyperhive.github_models import DeveloperStrongAreas, DomainArea, GitHubAnalysisRequest, LanguageUsage, TechnologyUsage
from hyperhive.llm_client import LLMResponseError
from hyperhive.profile_validation import ProfileValidationService
from hyperhive.telemetry import capture_events
from hyperhive.validation_models import ValidationAssessment

from conftest import DEFAULT_PROFILE, FakeLLM, add_learner


class FakeGitHubService:
    def __init__(self) -> None:
        self.requests: list[GitHubAnalysisRequest] = []

    async def analyze(self, request: GitHubAnalysisRequest) -> DeveloperStrongAreas:
        self.requests.append(request)
        return DeveloperStrongAreas(
            developer_username=request.username,
            total_commits=120,
            languages=[LanguageUsage(language="C#", file_count=10, percentage=100.0)],
            technologies=[TechnologyUsage(technology="ASP.NET Core"), TechnologyUsage(technology="Docker")],
            domain_areas=[DomainArea(area="Backend API"), DomainArea(area="DevOps")],
        )


def _service(session, llm=None, **overrides):
    settings = get_settings().model_copy(
        update={"github_repo_owner": "acme", "github_repo_name": "hive", **overrides}
    )
    github = FakeGitHubService()
    return ProfileValidationService(session, github, llm, settings), github


def test_rule_based_validation_without_llm(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service, github = _service(session)
    with capture_events() as events:
        result = asyncio.run(service.validate(learner.id, "octocat"))

    assert github.requests[0].owner == "acme"
    assert github.requests[0].repository == "hive"
    assert result.skills_comparison.matched_skills == ["C#", "ASP.NET Core", "Docker"]
    assert result.skills_comparison.match_percentage == 100.0
    # 40 for skills, 12 for commits, 2 for technologies, 6 for domains
    assert result.validation_score == 60
    assert result.validation_level == "Fair"
    assert len(result.recommendations) == 3
    assert result.github_profile.top_languages == ["C#"]
    assert result.github_profile.total_commits == 120
    event = next(event for event in events if event.name == "profile_validated")
    assert event.payload["source"] == "rule_based"


def test_llm_score_is_clamped(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    llm = FakeLLM(assessment=ValidationAssessment(score=140, analysis="Great", recommendations=["a", "b", "c", "d"]))
    service, _ = _service(session, llm)
    result = asyncio.run(service.validate(learner.id, "octocat"))

    assert result.validation_score == 100
    assert result.validation_level == "Excellent"
    assert result.ai_analysis == "Great"
    assert result.recommendations == ["a", "b", "c"]
    assert "octocat" in llm.prompts[0]


@pytest.mark.parametrize("failure", [LLMResponseError("empty"), RuntimeError("network down")])
def test_llm_failures_fall_back_to_rules(session, failure) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service, _ = _service(session, FakeLLM(assessment=failure))
    result = asyncio.run(service.validate(learner.id, "octocat"))
    assert result.validation_score == 60
    assert result.ai_analysis.startswith("Based on 120 commits and 100% skill match")


def test_learner_must_claim_skills(session) -> None:
    learner = add_learner(session, ai_profile={"skills": []})
    service, _ = _service(session)
    with pytest.raises(ValidationFailure, match="no skills"):
        asyncio.run(service.validate(learner.id, "octocat"))
    with pytest.raises(NotFoundError):
        asyncio.run(service.validate(9999, "octocat"))


def test_repository_settings_are_required(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service, _ = _service(session, github_repo_owner=None)
    with pytest.raises(RuntimeError, match="GITHUB_REPO_OWNER"):
        asyncio.run(service.validate(learner.id, "octocat"))
