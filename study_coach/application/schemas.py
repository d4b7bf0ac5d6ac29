"""Request bodies for the REST routes."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..domain.entities.smart_goal import GoalStatus
from ..domain.services.question_bank import GENERAL_SUBJECT


class StartAssessmentRequest(BaseModel):
    user_id: str = Field(min_length=1)
    subject: str = GENERAL_SUBJECT


class AnswerRequest(BaseModel):
    option: int


class ProfileUpdate(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    full_name: str = ""
    grade_level: str = ""
    learning_goals: list[str] = Field(default_factory=list)


class GoalCreate(BaseModel):
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    target_date: date


class GoalProgressUpdate(BaseModel):
    progress: int = Field(ge=0, le=100)
    status: Optional[GoalStatus] = None


class PathProgressUpdate(BaseModel):
    progress: int = Field(ge=0, le=100)


class StudySessionCreate(BaseModel):
    user_id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    duration: int = Field(ge=0, description="Minutes")
    scheduled_at: datetime
    notes: str = ""


class StudySessionComplete(BaseModel):
    notes: Optional[str] = None
