"""User profile entities for the study coach application."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UserProfile(BaseModel):
    """User profile entity created at signup and updated by profile edits."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
                "email": "asha@example.com",
                "full_name": "Asha Verma",
                "grade_level": "12",
                "learning_goals": ["jee-prep"],
            }
        }
    )

    id: str = Field(min_length=1, description="External auth user id")
    email: str = Field(min_length=3, max_length=320)
    full_name: str = Field(default="", max_length=200)
    grade_level: str = Field(default="", max_length=50)
    learning_goals: list[str] = Field(default_factory=list, description="Set of learning goal tags")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("learning_goals")
    @classmethod
    def _dedupe_goals(cls, goals: list[str]) -> list[str]:
        return list(dict.fromkeys(goals))

    @property
    def first_name(self) -> str:
        """First word of the full name, or an empty string."""
        parts = self.full_name.split()
        return parts[0] if parts else ""
