from __future__ import annotations

import pytest

from hyperhive.dependencies import get_llm_client

from conftest import DEFAULT_PROFILE, FakeLLM


@pytest.fixture()
def learner_id(client) -> int:
    response = client.post(
        "/api/learners",
        json={"name": "Quiz Taker", "email": "quiz@example.com", "aiProfile": DEFAULT_PROFILE},
    )
    return response.json()["id"]


def _generate(client, learner_id: int) -> dict:
    client.app.dependency_overrides[get_llm_client] = lambda: FakeLLM()
    response = client.post("/api/quiz/generate", json={"learnerId": learner_id, "quizType": "C#", "numberOfQuestions": 5})
    assert response.status_code == 200, response.text
    return response.json()


def _submit(client, quiz_id: int, learner_id: int, selected: list[str]):
    return client.post(
        "/api/quiz/submit",
        json={
            "quizId": quiz_id,
            "learnerId": learner_id,
            "answers": [{"questionId": index, "selectedAnswer": answer} for index, answer in enumerate(selected, 1)],
            "timeTakenSeconds": 90,
        },
    )


def test_generate_and_submit_quiz(client, learner_id) -> None:
    quiz = _generate(client, learner_id)
    assert len(quiz["questions"]) == 5
    assert "correct_answer" not in quiz["questions"][0]

    response = _submit(client, quiz["quiz_id"], learner_id, ["A", "X", "C", "D", "B"])
    assert response.status_code == 200
    result = response.json()
    assert result["score"] == 3
    assert result["percentage"] == 60.0
    assert result["feedback"] == "Good effort! Review the topics you missed and try again."

    attempt = client.get(f"/api/quiz/attempt/{result['attempt_id']}").json()
    assert attempt["score"] == 3
    assert len(attempt["results"]) == 5

    attempts = client.get(f"/api/quiz/learner/{learner_id}/attempts").json()
    assert [item["attempt_id"] for item in attempts] == [result["attempt_id"]]

    stats = client.get(f"/api/quiz/learner/{learner_id}/statistics").json()
    assert stats["total_quizzes_taken"] == 1
    assert stats["average_score"] == 60.0

    details = client.get(f"/api/quiz/{quiz['quiz_id']}").json()
    assert details["times_attempted"] == 1
    assert details["total_questions"] == 5


def test_second_submission_conflicts(client, learner_id) -> None:
    quiz = _generate(client, learner_id)
    assert _submit(client, quiz["quiz_id"], learner_id, ["A"] * 5).status_code == 200
    response = _submit(client, quiz["quiz_id"], learner_id, ["A"] * 5)
    assert response.status_code == 409
    assert response.json()["error"].startswith("You have already attempted this quiz")


def test_repeat_submissions_when_single_attempt_disabled(client, learner_id, monkeypatch) -> None:
    from hyperhive.config import get_settings

    monkeypatch.setenv("HYPERHIVE_QUIZ_SINGLE_ATTEMPT", "false")
    get_settings.cache_clear()
    quiz = _generate(client, learner_id)
    assert _submit(client, quiz["quiz_id"], learner_id, ["A"] * 5).status_code == 200
    assert _submit(client, quiz["quiz_id"], learner_id, ["B"] * 5).status_code == 200
    assert len(client.get(f"/api/quiz/learner/{learner_id}/attempts").json()) == 2


def test_unknown_quiz_and_attempt(client) -> None:
    assert _submit(client, 404, 1, ["A"]).status_code == 404
    assert client.get("/api/quiz/attempt/404").status_code == 404
    assert client.get("/api/quiz/404").json() == {"error": "Quiz with ID 404 not found"}


def test_generate_without_llm_is_a_server_error(client, learner_id) -> None:
    client.app.dependency_overrides[get_llm_client] = lambda: None
    response = client.post("/api/quiz/generate", json={"learnerId": learner_id, "quizType": "C#"})
    assert response.status_code == 500
    assert "OPENAI_API_KEY" in response.json()["error"]


def test_generate_reports_unexpected_failures(client, learner_id) -> None:
    client.app.dependency_overrides[get_llm_client] = lambda: FakeLLM(quiz=ValueError("model exploded"))
    response = client.post("/api/quiz/generate", json={"learnerId": learner_id, "quizType": "C#"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate quiz", "details": "model exploded"}
