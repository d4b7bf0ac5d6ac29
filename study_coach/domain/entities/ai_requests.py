"""Request models for the AI assistant and learning path endpoints."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import Field, model_validator

from .assessment import DifficultyLevel
from .wire import CamelModel

DEFAULT_PLAN_SUBJECTS = ("Mathematics", "Physics", "Chemistry")


class AIRequestKind(str, Enum):
    """Kinds of request the AI assistant understands."""

    STUDY_PLAN = "study-plan"
    QUESTION_EXPLANATION = "question-explanation"
    PERFORMANCE_ANALYSIS = "performance-analysis"
    LEARNING_PATH = "learning-path"


class AIRequest(CamelModel):
    """Body of ``POST /ai-assistant``."""

    type: AIRequestKind
    data: dict[str, Any] = Field(default_factory=dict)
    user_id: str = Field(min_length=1)


class StudyPlanInput(CamelModel):
    """Payload of a ``study-plan`` request."""

    subjects: list[str] = Field(default_factory=lambda: list(DEFAULT_PLAN_SUBJECTS))
    study_hours: float = Field(default=4, gt=0, le=24)
    target_date: Optional[datetime] = None


class ExplanationInput(CamelModel):
    """Payload of a ``question-explanation`` request."""

    question: str = Field(min_length=1)
    subject: str = "General"
    difficulty: str = DifficultyLevel.INTERMEDIATE.value


class PerformanceAnalysisInput(CamelModel):
    """Payload of a ``performance-analysis`` request (no options yet)."""


class AdaptivePathInput(CamelModel):
    """Payload of a ``learning-path`` request."""

    target_goal: str = Field(min_length=1)
    current_level: str = DifficultyLevel.BEGINNER.value
    timeframe: Union[int, str] = 30
    preferences: dict[str, Any] = Field(default_factory=dict)


class AssessmentSummary(CamelModel):
    """Assessment result as sent by a client that just finished a quiz."""

    subject: str = Field(min_length=1)
    score: int = Field(ge=0)
    total_questions: int = Field(ge=1)
    difficulty_level: Optional[str] = None
    learning_style: Optional[str] = None

    @model_validator(mode="after")
    def _score_within_total(self) -> "AssessmentSummary":
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed totalQuestions")
        return self


class LearningPathRequest(CamelModel):
    """Body of ``POST /generate-learning-path``.

    Either ``subjects`` or ``assessmentResults`` must be provided. When only
    assessment results are sent, subjects, difficulty and learning style are
    derived from them.
    """

    user_id: str = Field(min_length=1)
    subjects: list[str] = Field(default_factory=list)
    target_goal: str = ""
    timeframe: int = Field(default=30, ge=1, le=3650, description="Timeframe in days")
    study_hours_per_day: float = Field(default=2, gt=0, le=24)
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    learning_style: str = "reading"
    assessment_results: list[AssessmentSummary] = Field(default_factory=list)

    @model_validator(mode="after")
    def _needs_subjects(self) -> "LearningPathRequest":
        if not self.subjects and not self.assessment_results:
            raise ValueError("subjects or assessmentResults must be provided")
        return self
