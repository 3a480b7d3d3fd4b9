from __future__ import annotations

import asyncio
import json

import pytest

from hyperhive.errors import ConflictError, NotFoundError, ServiceError
from hyperhive.quiz_models import GenerateQuizRequest, QuizAnswer, SubmitQuizRequest
from hyperhive.quiz_service import DUPLICATE_ATTEMPT_MESSAGE, QuizService
from hyperhive.telemetry import capture_events

from conftest import DEFAULT_PROFILE, FakeLLM, add_learner


def _submission(quiz_id: int, learner_id: int, selected: list[str]) -> SubmitQuizRequest:
    return SubmitQuizRequest(
        quiz_id=quiz_id,
        learner_id=learner_id,
        answers=[QuizAnswer(question_id=index, selected_answer=answer) for index, answer in enumerate(selected, 1)],
        time_taken_seconds=120,
    )


def _generate(service: QuizService, learner_id: int):
    return asyncio.run(service.generate_quiz(GenerateQuizRequest(learner_id=learner_id, quiz_type="C# basics")))


def test_generated_quiz_hides_answers(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    llm = FakeLLM()
    with capture_events() as events:
        quiz = _generate(QuizService(session, llm), learner.id)

    assert quiz.title == "C# Fundamentals"
    assert len(quiz.questions) == 5
    dumped = quiz.model_dump()
    assert "correct_answer" not in dumped["questions"][0]
    assert dumped["questions"][0]["type"] == "multiple-choice"
    assert json.loads(llm.prompts[0])["skills"] == DEFAULT_PROFILE["skills"]
    assert [event.name for event in events if event.name.startswith("quiz")] == ["quiz_generated"]


def test_learner_without_profile_gets_default_prompt(session) -> None:
    learner = add_learner(session)
    llm = FakeLLM()
    _generate(QuizService(session, llm), learner.id)
    profile = json.loads(llm.prompts[0])
    assert profile["skills"] == ["General Software Development"]
    assert profile["currentLevel"] == "intermediate"


def test_generate_requires_llm_and_learner(session) -> None:
    learner = add_learner(session)
    with pytest.raises(ServiceError, match="OPENAI_API_KEY"):
        _generate(QuizService(session, None), learner.id)
    with pytest.raises(NotFoundError):
        _generate(QuizService(session, FakeLLM()), 4242)


def test_submit_grades_and_stores_attempt(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service = QuizService(session, FakeLLM())
    quiz = _generate(service, learner.id)

    result = asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A", "X", "C", "D", "B"])))
    assert result.score == 3
    assert result.total_questions == 5
    assert result.percentage == 60.0
    assert result.feedback == "Good effort! Review the topics you missed and try again."
    assert result.results[1].correct_answer == "B"
    assert service.has_attempted(quiz.quiz_id, learner.id)

    stored = service.get_attempt_results(result.attempt_id)
    assert stored.score == 3
    assert stored.percentage == 60.0
    assert [detail.is_correct for detail in stored.results] == [True, False, True, True, False]


def test_second_attempt_is_rejected_when_single_attempt_enforced(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service = QuizService(session, FakeLLM(), enforce_single_attempt=True)
    quiz = _generate(service, learner.id)
    asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A"] * 5)))

    with pytest.raises(ConflictError) as excinfo:
        asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["B"] * 5)))
    assert excinfo.value.message == DUPLICATE_ATTEMPT_MESSAGE
    assert len(service.list_learner_attempts(learner.id)) == 1


def test_repeat_attempts_allowed_when_not_enforced(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service = QuizService(session, FakeLLM(), enforce_single_attempt=False)
    quiz = _generate(service, learner.id)
    asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A"] * 5)))
    asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A", "B", "C", "D", "A"])))

    attempts = service.list_learner_attempts(learner.id)
    assert len(attempts) == 2
    assert service.quiz_details(quiz.quiz_id).times_attempted == 2


def test_submit_unknown_quiz(session) -> None:
    service = QuizService(session, None)
    with pytest.raises(NotFoundError):
        asyncio.run(service.submit_quiz(_submission(777, 1, ["A"])))
    with pytest.raises(NotFoundError):
        service.get_attempt_results(777)
    with pytest.raises(NotFoundError):
        service.quiz_details(777)


def test_statistics_summarize_attempts(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service = QuizService(session, FakeLLM(), enforce_single_attempt=False)
    quiz = _generate(service, learner.id)
    asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A", "B", "C", "D", "A"])))
    asyncio.run(service.submit_quiz(_submission(quiz.quiz_id, learner.id, ["A", "X", "C", "D", "B"])))

    stats = service.learner_statistics(learner.id)
    assert stats.total_quizzes_taken == 2
    assert stats.average_score == 80.0
    assert stats.best_score == 5
    assert stats.total_questions_answered == 10
    assert stats.total_correct_answers == 8
    assert len(stats.recent_attempts) == 2
    assert stats.recent_attempts[0].quiz_title == "C# Fundamentals"


def test_statistics_for_learner_without_attempts(session) -> None:
    stats = QuizService(session, None).learner_statistics(5)
    assert stats.total_quizzes_taken == 0
    assert stats.recent_attempts == []


def test_quiz_details(session) -> None:
    learner = add_learner(session, ai_profile=DEFAULT_PROFILE)
    service = QuizService(session, FakeLLM())
    quiz = _generate(service, learner.id)
    details = service.quiz_details(quiz.quiz_id)
    assert details.total_questions == 5
    assert details.times_attempted == 0
    assert details.quiz_type == "C# basics"
    assert details.difficulty == "intermediate"
