"""Row store protocol."""

from typing import Optional, Protocol, runtime_checkable
from uuid import UUID

from ..entities.assessment import Assessment
from ..entities.learning_path import LearningPath
from ..entities.smart_goal import GoalStatus, SmartGoal
from ..entities.study_session import StudySession
from ..entities.user_profile import UserProfile


@runtime_checkable
class RowStore(Protocol):
    """Protocol for the external row store holding all persistent state.

    Implementations can use different storage backends (in-memory,
    DynamoDB, etc.). Every write is an independent single-row operation;
    ``list_*`` methods return rows newest first.
    """

    async def find_user(self, user_id: str) -> Optional[UserProfile]:
        """Retrieve a user profile, or None when the user has no profile row."""
        ...

    async def save_user(self, profile: UserProfile) -> UserProfile:
        """Create or overwrite a user profile."""
        ...

    async def insert_assessment(self, assessment: Assessment) -> Assessment:
        """Insert one assessment row and return the stored row."""
        ...

    async def list_assessments(self, user_id: str, limit: Optional[int] = None) -> list[Assessment]:
        """List a user's assessments, most recently completed first.

        Args:
            user_id: Owner of the rows.
            limit: Maximum number of rows, or None for all.
        """
        ...

    async def insert_learning_path(self, path: LearningPath) -> LearningPath:
        """Insert one learning path row and return the stored row."""
        ...

    async def list_learning_paths(self, user_id: str, limit: Optional[int] = None) -> list[LearningPath]:
        """List a user's learning paths, newest first."""
        ...

    async def update_learning_path_progress(self, path_id: UUID, progress: int) -> LearningPath:
        """Set the progress of a learning path.

        Raises:
            ValueError: If the learning path is not found.
        """
        ...

    async def insert_goal(self, goal: SmartGoal) -> SmartGoal:
        """Insert one goal row and return the stored row."""
        ...

    async def list_goals(self, user_id: str, limit: Optional[int] = None) -> list[SmartGoal]:
        """List a user's goals, newest first."""
        ...

    async def update_goal_progress(
        self, goal_id: UUID, progress: int, status: Optional[GoalStatus] = None
    ) -> SmartGoal:
        """Set the progress (and optionally status) of a goal.

        Raises:
            ValueError: If the goal is not found.
        """
        ...

    async def insert_study_session(self, session: StudySession) -> StudySession:
        """Insert one study session row and return the stored row."""
        ...

    async def list_study_sessions(self, user_id: str, limit: Optional[int] = None) -> list[StudySession]:
        """List a user's study sessions, newest first."""
        ...

    async def complete_study_session(self, session_id: UUID, notes: Optional[str] = None) -> StudySession:
        """Mark a study session completed.

        Raises:
            ValueError: If the study session is not found.
        """
        ...
