"""SMART goal entities."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .user_profile import utc_now


class GoalStatus(str, Enum):
    """Goal lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    ABANDONED = "abandoned"


class SmartGoal(BaseModel):
    """Goal created by the learner and updated as progress is reported."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    target_date: date
    progress: int = Field(default=0, ge=0, le=100)
    status: GoalStatus = GoalStatus.ACTIVE
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def with_progress(self, progress: int, status: Optional[GoalStatus] = None) -> "SmartGoal":
        """Return a validated copy with new progress.

        Reaching 100 marks the goal completed unless a status is given.
        """
        if status is None:
            status = GoalStatus.COMPLETED if progress >= 100 else self.status
        data = self.model_dump()
        data.update(progress=progress, status=status, updated_at=utc_now())
        return SmartGoal.model_validate(data)
