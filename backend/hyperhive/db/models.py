"""ORM models backing the HyperHive persistence layer."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from .base import Base, TimestampMixin, utcnow

JSONType = JSON


class UserModel(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_email", "email", unique=True),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class LearnerModel(TimestampMixin, Base):
    __tablename__ = "learners"
    __table_args__ = (Index("ix_learners_email", "email", unique=True),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    department: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    joined_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ai_profile: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    quizzes: Mapped[list["QuizModel"]] = relationship(back_populates="learner", cascade="all, delete-orphan")
    attempts: Mapped[list["QuizAttemptModel"]] = relationship(
        back_populates="learner", cascade="all, delete-orphan"
    )


class QuizModel(Base):
    __tablename__ = "quizzes"
    __table_args__ = (Index("ix_quizzes_learner", "learner_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    learner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    quiz_type: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    difficulty: Mapped[str] = mapped_column(String(32), default="intermediate", nullable=False)
    questions: Mapped[list[dict]] = mapped_column(JSONType, default=list, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    learner: Mapped[LearnerModel] = relationship(back_populates="quizzes")
    attempts: Mapped[list["QuizAttemptModel"]] = relationship(
        back_populates="quiz", cascade="all, delete-orphan"
    )


class QuizAttemptModel(Base):
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        Index("ix_quiz_attempts_learner", "learner_id"),
        Index("ix_quiz_attempts_quiz_learner", "quiz_id", "learner_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quiz_id: Mapped[int] = mapped_column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    learner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("learners.id", ondelete="CASCADE"), nullable=False
    )
    answers: Mapped[list[dict]] = mapped_column(JSONType, default=list, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    time_taken_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    quiz: Mapped[QuizModel] = relationship(back_populates="attempts")
    learner: Mapped[LearnerModel] = relationship(back_populates="attempts")


__all__ = [
    "LearnerModel",
    "QuizAttemptModel",
    "QuizModel",
    "UserModel",
]
