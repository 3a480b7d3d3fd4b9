"""Quiz generation, submission and history for learners."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from .db.base import utcnow
from .db.models import LearnerModel, QuizAttemptModel, QuizModel
from .errors import ConflictError, NotFoundError, ServiceError
from .llm_client import LLMClient
from .quiz_models import (
    GenerateQuizPayload,
    GenerateQuizRequest,
    LearnerQuizStatistics,
    QuizAnswer,
    QuizAttemptSummary,
    QuizDetailsPayload,
    QuizQuestion,
    QuizQuestionPayload,
    SubmitQuizPayload,
    SubmitQuizRequest,
)
from .quiz_scoring import grade_quiz, quiz_feedback
from .repositories.learners import learners
from .telemetry import emit_event

logger = logging.getLogger(__name__)

QUIZ_LIFETIME = timedelta(days=30)
DEFAULT_DIFFICULTY = "intermediate"
RECENT_ATTEMPTS_LIMIT = 10
DUPLICATE_ATTEMPT_MESSAGE = "You have already attempted this quiz. Each quiz can only be taken once."


def default_profile_json(learner: LearnerModel) -> str:
    """Stand-in profile for learners who have not filled in their AI profile yet."""
    return json.dumps(
        {
            "name": learner.name,
            "position": learner.position,
            "department": learner.department,
            "skills": ["General Software Development"],
            "currentLevel": "intermediate",
        },
        indent=2,
    )


def _load_questions(quiz: QuizModel) -> List[QuizQuestion]:
    try:
        return [QuizQuestion.model_validate(item) for item in quiz.questions or []]
    except ValueError as exc:
        raise ServiceError(f"Invalid quiz data for quiz {quiz.id}: {exc}") from exc


def _summarize(attempt: QuizAttemptModel) -> QuizAttemptSummary:
    return QuizAttemptSummary(
        attempt_id=attempt.id,
        quiz_id=attempt.quiz_id,
        quiz_title=attempt.quiz.title,
        quiz_type=attempt.quiz.quiz_type,
        score=attempt.score,
        total_questions=attempt.total_questions,
        percentage=attempt.percentage,
        completed_at=attempt.completed_at or utcnow(),
        time_taken_seconds=attempt.time_taken_seconds,
    )


class QuizService:
    """Quiz operations bound to one database session.

    ``enforce_single_attempt`` selects between the two submission policies:
    when set, a second attempt at the same quiz by the same learner is
    rejected with a conflict; otherwise every submission is stored.
    """

    def __init__(self, session: Session, llm: Optional[LLMClient], *, enforce_single_attempt: bool = True) -> None:
        self._session = session
        self._llm = llm
        self._enforce_single_attempt = enforce_single_attempt

    async def generate_quiz(self, request: GenerateQuizRequest) -> GenerateQuizPayload:
        learner = learners.require_model(self._session, request.learner_id)

        if learner.ai_profile:
            profile_json = json.dumps(learner.ai_profile, indent=2)
        else:
            profile_json = default_profile_json(learner)
            logger.info("Learner %s has no AI profile; using default profile", learner.id)

        if self._llm is None:
            raise ServiceError("OPENAI_API_KEY must be configured to generate quizzes.")
        generated = await self._llm.generate_quiz(profile_json, request.quiz_type, request.number_of_questions)

        generated_at = utcnow()
        quiz = QuizModel(
            learner_id=learner.id,
            title=generated.title,
            quiz_type=request.quiz_type,
            difficulty=request.difficulty or DEFAULT_DIFFICULTY,
            questions=[question.model_dump(mode="json") for question in generated.questions],
            generated_at=generated_at,
            expires_at=generated_at + QUIZ_LIFETIME,
        )
        self._session.add(quiz)
        self._session.flush()
        logger.info("Quiz %s created for learner %s", quiz.id, learner.id)
        emit_event(
            "quiz_generated",
            quiz_id=quiz.id,
            learner_id=learner.id,
            quiz_type=request.quiz_type,
            question_count=len(generated.questions),
        )

        return GenerateQuizPayload(
            quiz_id=quiz.id,
            title=quiz.title,
            questions=[
                QuizQuestionPayload(
                    question_id=question.question_id,
                    question=question.question,
                    options=list(question.options),
                )
                for question in generated.questions
            ],
        )

    async def submit_quiz(self, request: SubmitQuizRequest) -> SubmitQuizPayload:
        quiz = self._session.get(QuizModel, request.quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz with ID {request.quiz_id} not found")

        if self._enforce_single_attempt and self.has_attempted(request.quiz_id, request.learner_id):
            raise ConflictError(DUPLICATE_ATTEMPT_MESSAGE)

        grade = grade_quiz(_load_questions(quiz), request.answers)
        completed_at = utcnow()
        attempt = QuizAttemptModel(
            quiz_id=quiz.id,
            learner_id=request.learner_id,
            answers=[answer.model_dump(mode="json") for answer in request.answers],
            score=grade.score,
            total_questions=grade.total_questions,
            percentage=Decimal(str(grade.percentage)),
            started_at=completed_at - timedelta(seconds=request.time_taken_seconds or 0),
            completed_at=completed_at,
            time_taken_seconds=request.time_taken_seconds or 0,
        )
        self._session.add(attempt)
        self._session.flush()
        emit_event(
            "quiz_submitted",
            quiz_id=quiz.id,
            learner_id=request.learner_id,
            attempt_id=attempt.id,
            score=grade.score,
            percentage=grade.percentage,
        )

        return SubmitQuizPayload(
            attempt_id=attempt.id,
            score=grade.score,
            total_questions=grade.total_questions,
            percentage=grade.percentage,
            feedback=quiz_feedback(grade.percentage),
            results=grade.results,
        )

    def get_attempt_results(self, attempt_id: int) -> SubmitQuizPayload:
        """Re-grade a stored attempt; score and percentage come from the stored record."""
        stmt = (
            select(QuizAttemptModel)
            .options(selectinload(QuizAttemptModel.quiz))
            .where(QuizAttemptModel.id == attempt_id)
        )
        attempt = self._session.execute(stmt).scalar_one_or_none()
        if attempt is None:
            raise NotFoundError(f"Quiz attempt with ID {attempt_id} not found")

        answers = [QuizAnswer.model_validate(item) for item in attempt.answers or []]
        grade = grade_quiz(_load_questions(attempt.quiz), answers)
        percentage = float(attempt.percentage)
        return SubmitQuizPayload(
            attempt_id=attempt.id,
            score=attempt.score,
            total_questions=attempt.total_questions,
            percentage=percentage,
            feedback=quiz_feedback(percentage),
            results=grade.results,
        )

    def _learner_attempts(self, learner_id: int, limit: Optional[int] = None) -> List[QuizAttemptModel]:
        stmt = (
            select(QuizAttemptModel)
            .options(selectinload(QuizAttemptModel.quiz))
            .where(QuizAttemptModel.learner_id == learner_id)
            .order_by(QuizAttemptModel.completed_at.desc(), QuizAttemptModel.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self._session.execute(stmt).scalars().all())

    def list_learner_attempts(self, learner_id: int) -> List[QuizAttemptSummary]:
        return [_summarize(attempt) for attempt in self._learner_attempts(learner_id)]

    def recent_attempts(self, learner_id: int, limit: int) -> List[QuizAttemptModel]:
        return self._learner_attempts(learner_id, limit)

    def learner_statistics(self, learner_id: int) -> LearnerQuizStatistics:
        attempts = self._learner_attempts(learner_id)
        if not attempts:
            return LearnerQuizStatistics(learner_id=learner_id)

        average = sum(float(attempt.percentage) for attempt in attempts) / len(attempts)
        return LearnerQuizStatistics(
            learner_id=learner_id,
            total_quizzes_taken=len(attempts),
            average_score=round(average, 2),
            best_score=max(attempt.score for attempt in attempts),
            total_questions_answered=sum(attempt.total_questions for attempt in attempts),
            total_correct_answers=sum(attempt.score for attempt in attempts),
            recent_attempts=[_summarize(attempt) for attempt in attempts[:RECENT_ATTEMPTS_LIMIT]],
        )

    def quiz_details(self, quiz_id: int) -> QuizDetailsPayload:
        quiz = self._session.get(QuizModel, quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz with ID {quiz_id} not found")
        attempts = self._session.execute(
            select(func.count()).select_from(QuizAttemptModel).where(QuizAttemptModel.quiz_id == quiz_id)
        ).scalar_one()
        return QuizDetailsPayload(
            quiz_id=quiz.id,
            title=quiz.title,
            quiz_type=quiz.quiz_type,
            difficulty=quiz.difficulty,
            generated_at=quiz.generated_at,
            expires_at=quiz.expires_at,
            total_questions=len(quiz.questions or []),
            times_attempted=attempts,
        )

    def has_attempted(self, quiz_id: int, learner_id: int) -> bool:
        stmt = (
            select(QuizAttemptModel.id)
            .where(QuizAttemptModel.quiz_id == quiz_id, QuizAttemptModel.learner_id == learner_id)
            .limit(1)
        )
        return self._session.execute(stmt).first() is not None


__all__ = [
    "DUPLICATE_ATTEMPT_MESSAGE",
    "QUIZ_LIFETIME",
    "QuizService",
    "default_profile_json",
]
