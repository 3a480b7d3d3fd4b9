"""Career growth plan generation with an LLM author and a template fallback."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from openai import OpenAIError
from sqlalchemy.orm import Session

from .db.base import utcnow
from .db.models import LearnerModel, QuizAttemptModel
from .errors import ValidationFailure
from .growth_plan_models import (
    GrowthPlanDraft,
    GrowthPlanPayload,
    LearningPhase,
    RecommendedResource,
    SkillGap,
)
from .learner_models import LearnerAIProfile
from .llm_client import LLMClient, LLMResponseError
from .quiz_service import QuizService
from .repositories.learners import learners, parse_ai_profile
from .telemetry import emit_event

logger = logging.getLogger(__name__)

MAX_PLAN_WEEKS = 6
PLAN_DURATION_MONTHS = 2
RECENT_QUIZ_ATTEMPTS = 5
FALLBACK_PHASES = 3
FALLBACK_WEEKS_PER_PHASE = 2
FALLBACK_RESOURCE_LIMIT = 5
DEFAULT_TARGET_LEVEL = "senior"

CAREER_PROGRESSION: Mapping[str, str] = MappingProxyType(
    {
        "beginner": "intermediate",
        "junior": "mid-level",
        "mid-level": "senior",
        "intermediate": "senior",
        "senior": "team lead",
        "team lead": "architect",
        "lead": "architect",
    }
)

LEVEL_REQUIRED_SKILLS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "senior": (
            "System Design",
            "Architecture Patterns",
            "Design Patterns",
            "Clean Architecture",
            "Microservices",
            "Performance Optimization",
            "Code Review",
            "Mentoring",
            "Technical Documentation",
        ),
        "team lead": (
            "Leadership",
            "Team Management",
            "Project Planning",
            "Agile/Scrum",
            "Stakeholder Communication",
            "Technical Strategy",
            "Conflict Resolution",
            "Performance Management",
            "Roadmap Planning",
        ),
        "architect": (
            "Enterprise Architecture",
            "Solution Architecture",
            "Cloud Architecture",
            "Scalability Design",
            "Security Architecture",
            "Technology Evaluation",
            "Cross-functional Collaboration",
            "Architecture Documentation",
            "Technical Vision",
        ),
    }
)


def determine_current_level(claimed_level: Optional[str]) -> str:
    """Place a learner one rung above their self-reported level.

    Planning starts from the level the learner is working towards, so a
    "junior" is planned from mid-level and a "senior" from team lead.
    """
    if not claimed_level:
        return "intermediate"
    normalized = claimed_level.strip().lower()
    if "junior" in normalized or "beginner" in normalized:
        return "mid-level"
    if "mid" in normalized or "intermediate" in normalized:
        return "senior"
    if "senior" in normalized:
        return "team lead"
    if "lead" in normalized:
        return "architect"
    return "senior"


def next_career_level(current_level: str) -> str:
    return CAREER_PROGRESSION.get(current_level.lower(), DEFAULT_TARGET_LEVEL)


def identify_skill_gaps(profile: LearnerAIProfile, target_level: str) -> List[SkillGap]:
    current_skills = profile.skills
    gaps: List[SkillGap] = []
    for required in LEVEL_REQUIRED_SKILLS.get(target_level.lower(), ()):
        wanted = required.lower()
        if not any(wanted in skill.lower() or skill.lower() in wanted for skill in current_skills):
            gaps.append(
                SkillGap(
                    skill_name=required,
                    current_proficiency="None",
                    target_proficiency="Advanced",
                    priority="High",
                    reasoning=f"Required for {target_level} level",
                )
            )

    for weak_area in profile.weak_areas:
        if any(gap.skill_name.lower() == weak_area.lower() for gap in gaps):
            continue
        gaps.append(
            SkillGap(
                skill_name=weak_area,
                current_proficiency="Basic",
                target_proficiency="Intermediate",
                priority="Medium",
                reasoning="Self-identified weak area",
            )
        )
    return gaps


def adjust_plan_to_max_weeks(plan: GrowthPlanDraft, max_weeks: int = MAX_PLAN_WEEKS) -> GrowthPlanDraft:
    """Scale phase durations so the plan totals ``max_weeks``.

    Every phase keeps at least one week, so a plan with more phases than
    ``max_weeks`` ends up at one week per phase and overshoots the cap.
    """
    phases = [phase.model_copy() for phase in plan.learning_phases]
    total = sum(phase.duration_weeks for phase in phases)
    if total <= 0 or not phases:
        return plan

    scale = max_weeks / total
    for phase in phases:
        phase.duration_weeks = max(1, round(phase.duration_weeks * scale))

    adjusted = sum(phase.duration_weeks for phase in phases)
    if adjusted < max_weeks:
        phases[0].duration_weeks += max_weeks - adjusted
    while adjusted > max_weeks:
        # trim the largest phase, latest first on ties
        index = max(reversed(range(len(phases))), key=lambda i: phases[i].duration_weeks)
        if phases[index].duration_weeks <= 1:
            break
        phases[index].duration_weeks -= 1
        adjusted -= 1

    return plan.model_copy(update={"learning_phases": phases, "estimated_duration_months": PLAN_DURATION_MONTHS})


def quiz_summary(attempts: Sequence[QuizAttemptModel]) -> str:
    if not attempts:
        return "No quiz data available"
    average = sum(float(attempt.percentage) for attempt in attempts) / len(attempts)
    return f"Average quiz score: {average:.1f}%"


def _phase_title(index: int, target_level: str) -> str:
    if index == 0:
        return "Foundation & Fundamentals"
    if index == 1:
        return "Core Concepts & Practice"
    if index == 2:
        return f"Application & {target_level} Skills"
    return "Advanced Topics"


def fallback_phases(target_level: str, gaps: Sequence[SkillGap]) -> List[LearningPhase]:
    phases: List[LearningPhase] = []
    per_phase = max(1, len(gaps) // FALLBACK_PHASES)
    for index in range(FALLBACK_PHASES):
        skills = [gap.skill_name for gap in gaps[index * per_phase : (index + 1) * per_phase]]
        if not skills:
            break
        first_week = index * FALLBACK_WEEKS_PER_PHASE + 1
        last_week = (index + 1) * FALLBACK_WEEKS_PER_PHASE
        phases.append(
            LearningPhase(
                phase_number=index + 1,
                title=f"Week {first_week}-{last_week}: {_phase_title(index, target_level)}",
                description=f"Intensive focus on {', '.join(skills)}",
                duration_weeks=FALLBACK_WEEKS_PER_PHASE,
                skills_to_cover=skills,
                learning_objectives=[f"Gain foundational knowledge in {skill}" for skill in skills],
                practical_projects=[f"Quick project applying {skills[0]}"],
                success_metrics="Complete objectives and mini-project",
            )
        )
    return phases


def fallback_resources(gaps: Sequence[SkillGap]) -> List[RecommendedResource]:
    return [
        RecommendedResource(
            title=f"Learning {gap.skill_name}",
            type="Course",
            url=f"https://learn.microsoft.com/search/?terms={gap.skill_name.replace(' ', '+')}",
            provider="Microsoft Learn",
            description=f"Comprehensive guide to {gap.skill_name}",
            skills_covered=[gap.skill_name],
            difficulty="Intermediate",
            is_free=True,
            estimated_hours=10,
        )
        for gap in gaps[:FALLBACK_RESOURCE_LIMIT]
    ]


def fallback_plan(current_level: str, target_level: str, gaps: Sequence[SkillGap]) -> GrowthPlanDraft:
    return GrowthPlanDraft(
        overview=(
            f"Intensive 6-week growth plan to progress from {current_level} to {target_level} level, "
            "focusing on key skill gaps and career development."
        ),
        estimated_duration_months=PLAN_DURATION_MONTHS,
        learning_phases=fallback_phases(target_level, gaps),
        recommended_resources=fallback_resources(gaps),
        key_milestones=[
            "Complete foundational courses in identified skill gaps",
            "Build and deploy 2-3 practical projects",
            "Contribute to team knowledge sharing",
            "Take on increased responsibilities",
            f"Demonstrate {target_level}-level competencies",
        ],
        success_criteria=(
            f"Successfully transition to {target_level} role with demonstrated competency in all required skills"
        ),
    )


def build_growth_plan_prompt(
    learner: LearnerModel,
    profile: LearnerAIProfile,
    current_level: str,
    target_level: str,
    gaps: Sequence[SkillGap],
    summary: str,
) -> str:
    gap_lines = "\n".join(f"- {gap.skill_name} ({gap.priority} priority): {gap.reasoning}" for gap in gaps)
    focus = ", ".join(gap.skill_name for gap in gaps[:5])
    return f"""
You are an expert career development advisor for software engineers. Generate a comprehensive growth plan.

LEARNER PROFILE:
- Name: {learner.name}
- Current Level: {current_level}
- Target Level: {target_level}
- Position: {learner.position}
- Department: {learner.department}
- Years of Experience: {profile.years_of_experience}

CURRENT SKILLS:
{", ".join(profile.skills)}

INTERESTS:
{", ".join(profile.interests)}

GOALS:
{", ".join(profile.goals)}

LEARNING STYLE: {profile.learning_style}
AVAILABLE HOURS PER WEEK: {profile.available_hours_per_week}

IDENTIFIED SKILL GAPS:
{gap_lines}

QUIZ PERFORMANCE:
{summary}

TASK:
Create a detailed growth plan to progress from {current_level} to {target_level}.

CAREER PROGRESSION RULES:
- If mid-level -> focus on: System Design, Architecture, Code Quality, Mentoring
- If senior -> focus on: Leadership, Team Management, Technical Strategy, Cross-team Collaboration
- If team lead -> focus on: Enterprise Architecture, Vision Setting, Stakeholder Management, Technical Direction

REQUIREMENTS:
1. Create 2-3 learning phases with TOTAL DURATION OF MAXIMUM 6 WEEKS
2. Each phase should be 2-3 weeks long
3. For each phase include: title, description, skills to cover, practical projects, success metrics
4. Focus on identified skill gaps (especially: {focus})
5. Recommend SPECIFIC learning resources with:
   - Real course/book/article names
   - Providers (Udemy, Coursera, Microsoft Learn, Pluralsight, etc.)
   - URLs (use realistic URLs even if approximate)
   - Difficulty level
   - Estimated hours
6. Include 3-5 key milestones
7. Define success criteria
8. CRITICAL: Total duration must not exceed 6 weeks

Return ONLY valid JSON in this EXACT format:
{{
  "overview": "Brief overview of the growth plan...",
  "estimatedDurationMonths": 2,
  "learningPhases": [
    {{
      "phaseNumber": 1,
      "title": "Phase Title",
      "description": "Phase description...",
      "durationWeeks": 2,
      "skillsToCover": ["Skill 1", "Skill 2"],
      "learningObjectives": ["Objective 1", "Objective 2"],
      "practicalProjects": ["Project 1", "Project 2"],
      "successMetrics": "How to measure success"
    }}
  ],
  "recommendedResources": [
    {{
      "title": "Clean Architecture Course",
      "type": "Course",
      "url": "https://www.udemy.com/course/clean-architecture",
      "provider": "Udemy",
      "description": "Learn clean architecture principles",
      "skillsCovered": ["Clean Architecture", "SOLID Principles"],
      "difficulty": "Intermediate",
      "isFree": false,
      "estimatedHours": 12
    }}
  ],
  "keyMilestones": [
    "Milestone 1",
    "Milestone 2"
  ],
  "successCriteria": "What defines success for this plan"
}}
"""


class GrowthPlanService:
    def __init__(self, session: Session, llm: Optional[LLMClient]) -> None:
        self._session = session
        self._llm = llm

    async def generate(self, learner_id: int) -> GrowthPlanPayload:
        logger.info("Generating growth plan for learner %s", learner_id)
        learner = learners.require_model(self._session, learner_id)
        profile = parse_ai_profile(learner)
        if profile is None:
            raise ValidationFailure("Learner profile data is missing")

        attempts = QuizService(self._session, None).recent_attempts(learner_id, RECENT_QUIZ_ATTEMPTS)
        current_level = determine_current_level(profile.current_level)
        target_level = next_career_level(current_level)
        gaps = identify_skill_gaps(profile, target_level)

        draft, source = await self._draft_plan(learner, profile, current_level, target_level, gaps, attempts)
        emit_event(
            "growth_plan_generated",
            learner_id=learner_id,
            current_level=current_level,
            target_level=target_level,
            skill_gap_count=len(gaps),
            source=source,
        )
        return GrowthPlanPayload(
            learner_id=learner.id,
            learner_name=learner.name,
            current_level=current_level,
            target_level=target_level,
            estimated_duration_months=draft.estimated_duration_months,
            overview=draft.overview,
            skill_gaps=gaps,
            learning_phases=draft.learning_phases,
            recommended_resources=draft.recommended_resources,
            key_milestones=draft.key_milestones,
            success_criteria=draft.success_criteria,
            generated_at=utcnow(),
        )

    async def _draft_plan(
        self,
        learner: LearnerModel,
        profile: LearnerAIProfile,
        current_level: str,
        target_level: str,
        gaps: List[SkillGap],
        attempts: Sequence[QuizAttemptModel],
    ) -> tuple[GrowthPlanDraft, str]:
        if self._llm is None:
            logger.warning("No LLM client configured; using template growth plan")
            return fallback_plan(current_level, target_level, gaps), "fallback"

        prompt = build_growth_plan_prompt(learner, profile, current_level, target_level, gaps, quiz_summary(attempts))
        try:
            draft = await self._llm.generate_growth_plan(prompt)
        except (LLMResponseError, OpenAIError) as exc:
            logger.warning("LLM growth plan failed, using template plan: %s", exc)
            return fallback_plan(current_level, target_level, gaps), "fallback"
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected LLM growth plan failure, using template plan")
            return fallback_plan(current_level, target_level, gaps), "fallback"

        total_weeks = sum(phase.duration_weeks for phase in draft.learning_phases)
        if total_weeks > MAX_PLAN_WEEKS:
            logger.warning("Generated plan spans %s weeks; scaling to %s", total_weeks, MAX_PLAN_WEEKS)
            draft = adjust_plan_to_max_weeks(draft)
        return draft, "llm"


__all__ = [
    "CAREER_PROGRESSION",
    "GrowthPlanService",
    "LEVEL_REQUIRED_SKILLS",
    "adjust_plan_to_max_weeks",
    "build_growth_plan_prompt",
    "determine_current_level",
    "fallback_plan",
    "identify_skill_gaps",
    "next_career_level",
    "quiz_summary",
]
