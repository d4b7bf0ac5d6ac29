"""Study session entities."""

import uuid
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .user_profile import utc_now


class StudySession(BaseModel):
    """A scheduled block of study, marked completed afterwards."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    duration: int = Field(ge=0, description="Duration in minutes")
    scheduled_at: datetime
    completed: bool = False
    notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    def mark_completed(self, notes: Optional[str] = None) -> "StudySession":
        """Return a completed copy, replacing notes when given."""
        update = {"completed": True}
        if notes is not None:
            update["notes"] = notes
        return self.model_copy(update=update)
