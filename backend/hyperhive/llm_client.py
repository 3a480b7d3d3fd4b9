"""Thin wrapper around the OpenAI chat completions API.

Every structured call asks the model for a bare JSON object, strips any
markdown fence the model adds anyway and validates the result with pydantic.
Callers decide whether an ``LLMResponseError`` is fatal or has a fallback.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from .config import Settings, get_settings
from .growth_plan_models import GrowthPlanDraft
from .quiz_models import GeneratedQuiz
from .validation_models import ValidationAssessment

logger = logging.getLogger(__name__)

QUIZ_SYSTEM_PROMPT = (
    "You are an expert educational content creator specializing in creating personalized quizzes "
    "for software engineers. Always respond with valid JSON only."
)
VALIDATION_SYSTEM_PROMPT = (
    "You are an expert at validating software engineer profiles against their real code contributions. "
    "Always respond with valid JSON only."
)
GROWTH_PLAN_SYSTEM_PROMPT = (
    "You are an expert career development advisor for software engineers. Always respond with valid JSON only."
)
CHAT_SYSTEM_PROMPT = (
    "You are HyperHive, a friendly learning assistant for software engineers. "
    "Answer questions about skills, career growth and learning resources clearly and concisely."
)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


class LLMResponseError(RuntimeError):
    """Raised when the model reply is empty or cannot be turned into the expected payload."""


def strip_json_fences(text: str) -> str:
    cleaned = _LEADING_FENCE.sub("", text.strip(), count=1)
    return _TRAILING_FENCE.sub("", cleaned, count=1).strip()


def build_quiz_prompt(profile_json: str, quiz_type: str, number_of_questions: int) -> str:
    return f"""
Based on this learner profile:
{profile_json}

Generate a {quiz_type} quiz with {number_of_questions} multiple-choice questions to validate their skills and knowledge.

Requirements:
- Questions should be relevant to their current skill level
- Each question should have 4 options (A, B, C, D)
- Include the correct answer
- Provide a brief explanation for the correct answer
- Make questions practical and scenario-based when possible

Return ONLY valid JSON in this EXACT format (no markdown, no extra text):
{{
  "title": "Quiz Title Here",
  "questions": [
    {{
      "questionId": 1,
      "question": "Question text here?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "Option B",
      "explanation": "Brief explanation why this is correct"
    }}
  ]
}}
"""


class LLMClient:
    def __init__(self, settings: Optional[Settings] = None, *, client: Optional[AsyncOpenAI] = None) -> None:
        self._settings = settings or get_settings()
        self._model = self._settings.openai_model
        if client is None:
            client = AsyncOpenAI(
                api_key=self._settings.require("openai_api_key"),
                base_url=self._settings.openai_base_url,
                timeout=self._settings.http_timeout_seconds,
            )
        self._client = client

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            raise LLMResponseError("Model returned an empty completion.")
        return choice.message.content

    async def _complete_json(self, system_prompt: str, user_prompt: str) -> dict:
        raw = await self.complete(system_prompt, user_prompt)
        logger.debug("LLM raw response: %s", raw)
        try:
            payload = json.loads(strip_json_fences(raw))
        except json.JSONDecodeError as exc:
            raise LLMResponseError(f"Model response was not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise LLMResponseError("Model response was not a JSON object.")
        return payload

    async def generate_quiz(self, profile_json: str, quiz_type: str, number_of_questions: int) -> GeneratedQuiz:
        payload = await self._complete_json(
            QUIZ_SYSTEM_PROMPT, build_quiz_prompt(profile_json, quiz_type, number_of_questions)
        )
        try:
            quiz = GeneratedQuiz.model_validate(payload)
        except ValidationError as exc:
            raise LLMResponseError(f"Failed to parse quiz from model response: {exc}") from exc
        if not quiz.questions:
            raise LLMResponseError("Failed to parse quiz from model response: no questions.")
        return quiz

    async def generate_validation_analysis(self, prompt: str) -> ValidationAssessment:
        payload = await self._complete_json(VALIDATION_SYSTEM_PROMPT, prompt)
        try:
            assessment = ValidationAssessment.model_validate(payload)
        except ValidationError as exc:
            raise LLMResponseError(f"Failed to parse validation analysis: {exc}") from exc
        if not assessment.recommendations:
            raise LLMResponseError("Validation analysis did not include recommendations.")
        return assessment

    async def generate_growth_plan(self, prompt: str) -> GrowthPlanDraft:
        payload = await self._complete_json(GROWTH_PLAN_SYSTEM_PROMPT, prompt)
        try:
            plan = GrowthPlanDraft.model_validate(payload)
        except ValidationError as exc:
            raise LLMResponseError(f"Failed to parse growth plan: {exc}") from exc
        if not plan.learning_phases:
            raise LLMResponseError("Growth plan did not include any learning phases.")
        return plan

    async def chat(self, message: str) -> str:
        return await self.complete(CHAT_SYSTEM_PROMPT, message)


__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "LLMClient",
    "LLMResponseError",
    "QUIZ_SYSTEM_PROMPT",
    "build_quiz_prompt",
    "strip_json_fences",
]
