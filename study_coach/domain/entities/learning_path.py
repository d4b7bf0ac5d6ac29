"""Learning path row entity."""

import uuid
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .user_profile import utc_now


class LearningPath(BaseModel):
    """Stored learning path, created by the AI assistant or its rule-based fallback."""

    id: UUID = Field(default_factory=uuid.uuid4)
    user_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    subjects: list[str] = Field(default_factory=list, description="Ordered subject names")
    difficulty_level: str = "beginner"
    estimated_duration: int = Field(default=0, ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def with_progress(self, progress: int) -> "LearningPath":
        """Return a validated copy with new progress."""
        data = self.model_dump()
        data.update(progress=progress, updated_at=utc_now())
        return LearningPath.model_validate(data)
