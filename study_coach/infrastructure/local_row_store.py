"""Local in-memory implementation of the RowStore."""

from datetime import datetime
from typing import Callable, Dict, Optional, TypeVar
from uuid import UUID

from ..domain.entities.assessment import Assessment
from ..domain.entities.learning_path import LearningPath
from ..domain.entities.smart_goal import GoalStatus, SmartGoal
from ..domain.entities.study_session import StudySession
from ..domain.entities.user_profile import UserProfile, utc_now
from ..domain.interfaces.row_store import RowStore

_Row = TypeVar("_Row")


def _newest_first(
    rows: Dict[UUID, _Row],
    user_id: str,
    timestamp: Callable[[_Row], datetime],
    limit: Optional[int],
) -> list[_Row]:
    owned = [row for row in rows.values() if row.user_id == user_id]
    owned.sort(key=timestamp, reverse=True)
    return owned if limit is None else owned[:limit]


class LocalRowStore(RowStore):
    """Local in-memory implementation of the RowStore protocol.

    Stores each table in a dictionary for testing and development purposes.
    """

    def __init__(self):
        """Initialize the local row store with empty tables."""
        self._users: Dict[str, UserProfile] = {}
        self._assessments: Dict[UUID, Assessment] = {}
        self._learning_paths: Dict[UUID, LearningPath] = {}
        self._goals: Dict[UUID, SmartGoal] = {}
        self._study_sessions: Dict[UUID, StudySession] = {}

    # ===== users =====

    async def find_user(self, user_id: str) -> Optional[UserProfile]:
        return self._users.get(user_id)

    async def save_user(self, profile: UserProfile) -> UserProfile:
        existing = self._users.get(profile.id)
        if existing is not None:
            profile = profile.model_copy(update={"created_at": existing.created_at, "updated_at": utc_now()})
        self._users[profile.id] = profile
        return profile

    # ===== assessments =====

    async def insert_assessment(self, assessment: Assessment) -> Assessment:
        self._assessments[assessment.id] = assessment
        return assessment

    async def list_assessments(self, user_id: str, limit: Optional[int] = None) -> list[Assessment]:
        return _newest_first(self._assessments, user_id, lambda a: a.completed_at, limit)

    # ===== learning paths =====

    async def insert_learning_path(self, path: LearningPath) -> LearningPath:
        self._learning_paths[path.id] = path
        return path

    async def list_learning_paths(self, user_id: str, limit: Optional[int] = None) -> list[LearningPath]:
        return _newest_first(self._learning_paths, user_id, lambda p: p.created_at, limit)

    async def update_learning_path_progress(self, path_id: UUID, progress: int) -> LearningPath:
        if path_id not in self._learning_paths:
            raise ValueError(f"Learning path with id {path_id} not found")

        updated = self._learning_paths[path_id].with_progress(progress)
        self._learning_paths[path_id] = updated
        return updated

    # ===== goals =====

    async def insert_goal(self, goal: SmartGoal) -> SmartGoal:
        self._goals[goal.id] = goal
        return goal

    async def list_goals(self, user_id: str, limit: Optional[int] = None) -> list[SmartGoal]:
        return _newest_first(self._goals, user_id, lambda g: g.created_at, limit)

    async def update_goal_progress(
        self, goal_id: UUID, progress: int, status: Optional[GoalStatus] = None
    ) -> SmartGoal:
        if goal_id not in self._goals:
            raise ValueError(f"Goal with id {goal_id} not found")

        updated = self._goals[goal_id].with_progress(progress, status)
        self._goals[goal_id] = updated
        return updated

    # ===== study sessions =====

    async def insert_study_session(self, session: StudySession) -> StudySession:
        self._study_sessions[session.id] = session
        return session

    async def list_study_sessions(self, user_id: str, limit: Optional[int] = None) -> list[StudySession]:
        return _newest_first(self._study_sessions, user_id, lambda s: s.created_at, limit)

    async def complete_study_session(self, session_id: UUID, notes: Optional[str] = None) -> StudySession:
        if session_id not in self._study_sessions:
            raise ValueError(f"Study session with id {session_id} not found")

        updated = self._study_sessions[session_id].mark_completed(notes)
        self._study_sessions[session_id] = updated
        return updated

    def clear(self) -> None:
        """Clear every table."""
        self._users.clear()
        self._assessments.clear()
        self._learning_paths.clear()
        self._goals.clear()
        self._study_sessions.clear()
