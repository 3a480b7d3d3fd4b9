"""Quiz request, response and stored-question models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .learner_models import CamelInputModel


class QuizQuestion(CamelInputModel):
    """A stored question, including the answer key."""

    question_id: int
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str
    explanation: Optional[str] = None


class GeneratedQuiz(CamelInputModel):
    """Shape the LLM is asked to return when authoring a quiz."""

    title: str = ""
    questions: List[QuizQuestion] = Field(default_factory=list)


class GenerateQuizRequest(CamelInputModel):
    learner_id: int
    quiz_type: str = ""
    difficulty: Optional[str] = None
    number_of_questions: int = Field(default=5, ge=1, le=50)


class QuizQuestionPayload(BaseModel):
    question_id: int
    question: str
    options: List[str] = Field(default_factory=list)
    type: str = "multiple-choice"


class GenerateQuizPayload(BaseModel):
    quiz_id: int
    title: str
    questions: List[QuizQuestionPayload] = Field(default_factory=list)


class QuizAnswer(CamelInputModel):
    question_id: int
    selected_answer: str = ""


class SubmitQuizRequest(CamelInputModel):
    quiz_id: int
    learner_id: int
    answers: List[QuizAnswer] = Field(default_factory=list)
    time_taken_seconds: Optional[int] = Field(default=None, ge=0)


class QuizResultDetail(BaseModel):
    question_id: int
    question: str
    your_answer: str
    correct_answer: str
    is_correct: bool
    explanation: Optional[str] = None


class SubmitQuizPayload(BaseModel):
    attempt_id: int
    score: int
    total_questions: int
    percentage: float
    feedback: str
    results: List[QuizResultDetail] = Field(default_factory=list)


class QuizAttemptSummary(BaseModel):
    attempt_id: int
    quiz_id: int
    quiz_title: str
    quiz_type: str
    score: int
    total_questions: int
    percentage: float
    completed_at: Optional[datetime] = None
    time_taken_seconds: Optional[int] = None

    @field_validator("percentage", mode="before")
    @classmethod
    def _coerce_decimal(cls, value):
        return float(value)


class LearnerQuizStatistics(BaseModel):
    learner_id: int
    total_quizzes_taken: int = 0
    average_score: float = 0.0
    best_score: int = 0
    total_questions_answered: int = 0
    total_correct_answers: int = 0
    recent_attempts: List[QuizAttemptSummary] = Field(default_factory=list)


class QuizDetailsPayload(BaseModel):
    quiz_id: int
    title: str
    quiz_type: str
    difficulty: str
    generated_at: datetime
    expires_at: Optional[datetime] = None
    total_questions: int
    times_attempted: int


__all__ = [
    "GenerateQuizPayload",
    "GenerateQuizRequest",
    "GeneratedQuiz",
    "LearnerQuizStatistics",
    "QuizAnswer",
    "QuizAttemptSummary",
    "QuizDetailsPayload",
    "QuizQuestion",
    "QuizQuestionPayload",
    "QuizResultDetail",
    "SubmitQuizPayload",
    "SubmitQuizRequest",
]
