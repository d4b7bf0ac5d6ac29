"""Quiz session entities for the assessment flow."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .assessment import AssessmentResult, PublicQuestion
from .user_profile import utc_now


class QuizStatus(str, Enum):
    """Quiz session status enum."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SAVE_FAILED = "save_failed"


class QuizSession(BaseModel):
    """In-progress (or finished) quiz for one learner."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    question_ids: list[str] = Field(min_length=1)
    current_index: int = Field(default=0, ge=0)
    answers: list[Optional[int]] = Field(default_factory=list)
    status: QuizStatus = QuizStatus.IN_PROGRESS
    started_at: datetime = Field(default_factory=utc_now)
    last_activity_at: datetime = Field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    result: Optional[AssessmentResult] = None
    assessment_id: Optional[UUID] = None

    @model_validator(mode="after")
    def _align_answers(self) -> "QuizSession":
        if not self.answers:
            self.answers = [None] * len(self.question_ids)
        if len(self.answers) != len(self.question_ids):
            raise ValueError("answers must have one slot per question")
        if self.current_index >= len(self.question_ids):
            raise ValueError("current_index out of range")
        return self

    @property
    def total_questions(self) -> int:
        return len(self.question_ids)

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.question_ids) - 1


class QuizStepStatus(str, Enum):
    """What a quiz step represents."""

    QUESTION = "question"
    COMPLETED = "completed"
    SAVE_FAILED = "save_failed"


class QuizStep(BaseModel):
    """View of a quiz after an interaction, returned to the client."""

    quiz_id: str
    status: QuizStepStatus
    position: int = Field(ge=1, description="1-based index of the current question")
    total: int = Field(ge=1)
    question: Optional[PublicQuestion] = None
    selected_option: Optional[int] = None
    message: Optional[str] = None
    result: Optional[AssessmentResult] = None
