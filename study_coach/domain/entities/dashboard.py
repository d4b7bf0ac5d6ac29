"""Dashboard view entities."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .assessment import Assessment
from .learning_path import LearningPath
from .smart_goal import SmartGoal
from .study_session import StudySession
from .user_profile import UserProfile, utc_now


class RequestState(str, Enum):
    """State of one kind of AI request as seen by the dashboard."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DashboardStats(BaseModel):
    """Headline numbers shown above the dashboard panels."""

    assessments_taken: int = 0
    average_score: Optional[int] = Field(default=None, description="Average recent score in percent")
    active_goals: int = 0
    path_progress: Optional[int] = Field(default=None, description="Average learning path progress")
    study_streak_days: int = 0


class DashboardSnapshot(BaseModel):
    """Most recently fetched rows for the signed-in learner."""

    user_id: str
    profile: Optional[UserProfile] = None
    assessments: list[Assessment] = Field(default_factory=list)
    learning_paths: list[LearningPath] = Field(default_factory=list)
    goals: list[SmartGoal] = Field(default_factory=list)
    study_sessions: list[StudySession] = Field(default_factory=list)
    stats: DashboardStats = Field(default_factory=DashboardStats)
    refreshed_at: datetime = Field(default_factory=utc_now)

    @property
    def display_name(self) -> str:
        if self.profile and self.profile.first_name:
            return self.profile.first_name
        return "Student"
