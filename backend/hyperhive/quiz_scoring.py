"""Pure grading of a quiz attempt against its stored answer key."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .quiz_models import QuizAnswer, QuizQuestion, QuizResultDetail

NO_ANSWER = "No answer"

_FEEDBACK_BANDS = (
    (90, "Excellent! You have a strong grasp of the material."),
    (75, "Great job! You're doing well, but there's room for improvement."),
    (60, "Good effort! Review the topics you missed and try again."),
    (50, "You're getting there! More practice will help you improve."),
)
_FEEDBACK_FLOOR = "Keep learning! Review the material and don't give up."


@dataclass(frozen=True)
class QuizGrade:
    score: int
    total_questions: int
    percentage: float
    results: List[QuizResultDetail] = field(default_factory=list)


def quiz_feedback(percentage: float) -> str:
    for threshold, message in _FEEDBACK_BANDS:
        if percentage >= threshold:
            return message
    return _FEEDBACK_FLOOR


def grade_quiz(questions: Sequence[QuizQuestion], answers: Sequence[QuizAnswer]) -> QuizGrade:
    """Grade every question in quiz order.

    Answers are looked up by question id (first submission wins). Selected and
    correct answers are compared byte for byte: no trimming, no case folding.
    Answers for unknown question ids are ignored.
    """
    submitted: Dict[int, str] = {}
    for answer in answers:
        submitted.setdefault(answer.question_id, answer.selected_answer)

    results: List[QuizResultDetail] = []
    score = 0
    for question in questions:
        selected = submitted.get(question.question_id)
        is_correct = selected is not None and selected == question.correct_answer
        if is_correct:
            score += 1
        results.append(
            QuizResultDetail(
                question_id=question.question_id,
                question=question.question,
                your_answer=selected if selected is not None else NO_ANSWER,
                correct_answer=question.correct_answer,
                is_correct=is_correct,
                explanation=question.explanation,
            )
        )

    total = len(questions)
    percentage = round(score / total * 100, 2) if total else 0.0
    return QuizGrade(score=score, total_questions=total, percentage=percentage, results=results)


__all__ = ["NO_ANSWER", "QuizGrade", "grade_quiz", "quiz_feedback"]
