from __future__ import annotations

import asyncio
import json

import pytest

from hyperhive.config import get_settings
from hyperhive.llm_client import LLMClient, LLMResponseError, build_quiz_prompt, strip_json_fences

from conftest import fake_openai

QUIZ_JSON = json.dumps(
    {
        "title": "Docker Basics",
        "questions": [
            {
                "questionId": 1,
                "question": "What builds an image?",
                "options": ["docker build", "docker run", "docker ps", "docker rm"],
                "correctAnswer": "docker build",
                "explanation": "It reads the Dockerfile.",
            }
        ],
    }
)


def _client(content):
    return LLMClient(get_settings(), client=fake_openai(content))


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  ```JSON {"a": 1}```  ',
    ],
)
def test_strip_json_fences(raw: str) -> None:
    assert json.loads(strip_json_fences(raw)) == {"a": 1}


def test_quiz_prompt_mentions_request() -> None:
    prompt = build_quiz_prompt('{"skills": []}', "Docker", 7)
    assert "Generate a Docker quiz with 7 multiple-choice questions" in prompt
    assert '"questionId": 1' in prompt


def test_generate_quiz_parses_fenced_camel_case_json() -> None:
    client = _client(f"```json\n{QUIZ_JSON}\n```")
    quiz = asyncio.run(client.generate_quiz("{}", "Docker", 1))
    assert quiz.title == "Docker Basics"
    assert quiz.questions[0].question_id == 1
    assert quiz.questions[0].correct_answer == "docker build"


def test_generate_quiz_sends_system_and_user_messages() -> None:
    openai_client = fake_openai(QUIZ_JSON)
    client = LLMClient(get_settings(), client=openai_client)
    asyncio.run(client.generate_quiz("{}", "Docker", 1))
    call = openai_client.chat.completions.calls[0]
    assert [message["role"] for message in call["messages"]] == ["system", "user"]
    assert call["model"] == get_settings().openai_model


@pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]", '{"title": "Empty", "questions": []}'])
def test_generate_quiz_rejects_unusable_replies(content) -> None:
    with pytest.raises(LLMResponseError):
        asyncio.run(_client(content).generate_quiz("{}", "Docker", 1))


def test_validation_analysis_requires_recommendations() -> None:
    good = _client('{"score": 81, "analysis": "Solid", "recommendations": ["a", "b", "c"]}')
    assessment = asyncio.run(good.generate_validation_analysis("prompt"))
    assert assessment.score == 81
    assert assessment.recommendations == ["a", "b", "c"]

    with pytest.raises(LLMResponseError):
        asyncio.run(_client('{"score": 81, "analysis": "Solid"}').generate_validation_analysis("prompt"))


def test_growth_plan_requires_phases() -> None:
    payload = {
        "overview": "Grow",
        "estimatedDurationMonths": 2,
        "learningPhases": [{"phaseNumber": 1, "title": "Start", "durationWeeks": 6}],
    }
    plan = asyncio.run(_client(json.dumps(payload)).generate_growth_plan("prompt"))
    assert plan.learning_phases[0].duration_weeks == 6

    with pytest.raises(LLMResponseError):
        asyncio.run(_client('{"overview": "Grow"}').generate_growth_plan("prompt"))


def test_chat_returns_raw_text() -> None:
    assert asyncio.run(_client("Hi there").chat("hello")) == "Hi there"
