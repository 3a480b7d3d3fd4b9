from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Iterator, List, Optional

import pytest
from sqlalchemy.orm import Session

from hyperhive.config import get_settings
from hyperhive.db.base import Base
from hyperhive.db.models import LearnerModel
from hyperhive.db.session import dispose_engine, get_engine, session_scope
from hyperhive.growth_plan_models import GrowthPlanDraft
from hyperhive.quiz_models import GeneratedQuiz, QuizQuestion
from hyperhive.validation_models import ValidationAssessment

DEFAULT_PROFILE = {
    "skills": ["C#", "ASP.NET Core", "Docker"],
    "interests": ["Cloud"],
    "goals": ["Become a senior engineer"],
    "currentLevel": "Junior",
    "weakAreas": ["Testing"],
}


@pytest.fixture()
def database(tmp_path, monkeypatch) -> Iterator[None]:
    monkeypatch.setenv("HYPERHIVE_DATABASE_URL", f"sqlite:///{tmp_path / 'hyperhive.sqlite'}")
    monkeypatch.setenv("HYPERHIVE_JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
    get_settings.cache_clear()
    dispose_engine()
    Base.metadata.create_all(get_engine())
    yield
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture()
def session(database) -> Iterator[Session]:
    with session_scope() as db_session:
        yield db_session


def add_learner(
    session: Session,
    *,
    name: str = "Ada Lovelace",
    email: str = "ada@example.com",
    ai_profile: Optional[dict] = None,
) -> LearnerModel:
    learner = LearnerModel(
        name=name,
        email=email,
        position="Software Engineer",
        department="Platform",
        ai_profile=ai_profile,
    )
    session.add(learner)
    session.flush()
    return learner


def sample_quiz(answers: List[str]) -> GeneratedQuiz:
    return GeneratedQuiz(
        title="C# Fundamentals",
        questions=[
            QuizQuestion(
                question_id=index,
                question=f"Question {index}?",
                options=["A", "B", "C", "D"],
                correct_answer=answer,
                explanation=f"Because {answer}",
            )
            for index, answer in enumerate(answers, start=1)
        ],
    )


class FakeLLM:
    """Stands in for ``LLMClient``; set an attribute to an Exception to make that call fail."""

    def __init__(
        self,
        *,
        quiz: Any = None,
        assessment: Any = None,
        plan: Any = None,
        reply: Any = "Hello from HyperHive",
    ) -> None:
        self.quiz = quiz if quiz is not None else sample_quiz(["A", "B", "C", "D", "A"])
        self.assessment = assessment
        self.plan = plan
        self.reply = reply
        self.prompts: List[str] = []

    @staticmethod
    def _resolve(value: Any) -> Any:
        if isinstance(value, Exception):
            raise value
        return value

    async def generate_quiz(self, profile_json: str, quiz_type: str, number_of_questions: int) -> GeneratedQuiz:
        self.prompts.append(profile_json)
        return self._resolve(self.quiz)

    async def generate_validation_analysis(self, prompt: str) -> ValidationAssessment:
        self.prompts.append(prompt)
        return self._resolve(self.assessment)

    async def generate_growth_plan(self, prompt: str) -> GrowthPlanDraft:
        self.prompts.append(prompt)
        return self._resolve(self.plan)

    async def chat(self, message: str) -> str:
        self.prompts.append(message)
        return self._resolve(self.reply)


class FakeCompletions:
    def __init__(self, content: Optional[str]) -> None:
        self.content = content
        self.calls: List[dict] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def fake_openai(content: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content)))


@pytest.fixture()
def client(database) -> Iterator[Any]:
    from fastapi.testclient import TestClient

    from hyperhive.main import app

    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
