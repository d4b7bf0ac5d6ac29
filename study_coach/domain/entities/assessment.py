"""Assessment entities: stored rows, quiz questions and quiz results."""

import uuid
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .user_profile import utc_now
from .wire import CamelModel


class DifficultyLevel(str, Enum):
    """Three-tier difficulty label."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class LearningStyle(str, Enum):
    """Learning style derived from quiz pace and accuracy."""

    QUICK_LEARNER = "quick_learner"
    THOROUGH = "thorough"
    BALANCED = "balanced"


class Assessment(BaseModel):
    """One completed quiz. Created once and never modified."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    score: int = Field(ge=0)
    total_questions: int = Field(ge=1)
    difficulty_level: str = DifficultyLevel.BEGINNER.value
    learning_style: str = LearningStyle.BALANCED.value
    completed_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _score_within_total(self) -> "Assessment":
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self

    @property
    def normalized_score(self) -> float:
        """Score as a fraction of the question count."""
        return self.score / self.total_questions


class Question(BaseModel):
    """Multiple-choice question from the question bank."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    options: tuple[str, ...] = Field(min_length=2)
    correct_answer: int = Field(ge=0)
    subject: str
    difficulty: DifficultyLevel
    topic: str

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "Question":
        if self.correct_answer >= len(self.options):
            raise ValueError(f"correct_answer out of range for question {self.id}")
        return self

    def public_view(self) -> "PublicQuestion":
        """Return the question without its correct answer."""
        return PublicQuestion(
            id=self.id,
            question=self.question,
            options=list(self.options),
            subject=self.subject,
            difficulty=self.difficulty,
            topic=self.topic,
        )


class PublicQuestion(BaseModel):
    """Question as presented to the learner."""

    id: str
    question: str
    options: list[str]
    subject: str
    difficulty: DifficultyLevel
    topic: str


class AssessmentResult(CamelModel):
    """Computed outcome of a completed quiz."""

    subject: str
    score: int = Field(ge=0)
    total_questions: int = Field(ge=1)
    percentage: float = Field(ge=0, le=100)
    difficulty_level: DifficultyLevel
    learning_style: LearningStyle
    recommendations: list[str] = Field(default_factory=list)
    elapsed_seconds: float = Field(default=0, ge=0)
