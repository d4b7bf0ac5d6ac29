"""Dashboard service holding a learner's latest rows and AI request state."""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from ..entities.ai_requests import DEFAULT_PLAN_SUBJECTS, AIRequest, AIRequestKind
from ..entities.assessment import Assessment
from ..entities.dashboard import DashboardSnapshot, DashboardStats, RequestState
from ..entities.learning_path import LearningPath
from ..entities.smart_goal import GoalStatus, SmartGoal
from ..entities.study_session import StudySession
from ..entities.user_profile import utc_now
from ..interfaces.row_store import RowStore
from .ai_assistant import PLAN_HORIZON, AIAssistantService
from .recommendations import average_score

logger = logging.getLogger(__name__)

RECENT_ASSESSMENTS = 3
RECENT_GOALS = 5
RECENT_STUDY_SESSIONS = 50
DEFAULT_STUDY_HOURS = 4


def study_streak(sessions: Sequence[StudySession], today: date) -> int:
    """Consecutive days with a completed session, ending today or yesterday."""
    days = {session.scheduled_at.date() for session in sessions if session.completed}
    day = today if today in days else today - timedelta(days=1)
    streak = 0
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def compute_stats(
    assessments: Sequence[Assessment],
    learning_paths: Sequence[LearningPath],
    goals: Sequence[SmartGoal],
    sessions: Sequence[StudySession],
    today: date,
) -> DashboardStats:
    avg = average_score(assessments)
    return DashboardStats(
        assessments_taken=len(assessments),
        average_score=None if avg is None else round(avg * 100),
        active_goals=sum(1 for goal in goals if goal.status is GoalStatus.ACTIVE),
        path_progress=(
            round(sum(path.progress for path in learning_paths) / len(learning_paths)) if learning_paths else None
        ),
        study_streak_days=study_streak(sessions, today),
    )


class DashboardService:
    """
    Per-learner dashboard state.

    ``snapshot`` holds the rows from the last ``refresh``. Every AI request
    kind has its own state and last error, so a running analysis does not
    mark a study plan request as loading.
    """

    def __init__(
        self,
        user_id: str,
        row_store: RowStore,
        assistant: AIAssistantService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.user_id = user_id
        self.row_store = row_store
        self.assistant = assistant
        self._clock = clock

        self.snapshot = DashboardSnapshot(user_id=user_id)
        self.states: dict[AIRequestKind, RequestState] = {kind: RequestState.IDLE for kind in AIRequestKind}
        self.errors: dict[AIRequestKind, Optional[str]] = {kind: None for kind in AIRequestKind}

    async def refresh(self) -> DashboardSnapshot:
        """Re-read the learner's rows and recompute the stats."""
        profile = await self.row_store.find_user(self.user_id)
        assessments = await self.row_store.list_assessments(self.user_id, limit=RECENT_ASSESSMENTS)
        paths = await self.row_store.list_learning_paths(self.user_id)
        goals = await self.row_store.list_goals(self.user_id, limit=RECENT_GOALS)
        sessions = await self.row_store.list_study_sessions(self.user_id, limit=RECENT_STUDY_SESSIONS)

        now = self._clock()
        self.snapshot = DashboardSnapshot(
            user_id=self.user_id,
            profile=profile,
            assessments=assessments,
            learning_paths=paths,
            goals=goals,
            study_sessions=sessions,
            stats=compute_stats(assessments, paths, goals, sessions, now.date()),
            refreshed_at=now,
        )
        return self.snapshot

    def is_loading(self, kind: AIRequestKind) -> bool:
        return self.states[kind] is RequestState.LOADING

    async def run(self, kind: AIRequestKind, data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Dispatch one AI request for this learner and track its state.

        The dashboard is refreshed after a successful request. Failures are
        recorded against the request kind and re-raised.
        """
        self.states[kind] = RequestState.LOADING
        self.errors[kind] = None
        try:
            result = await self.assistant.handle(AIRequest(type=kind, data=data or {}, user_id=self.user_id))
        except Exception as e:
            logger.error(f"AI assistant error for {kind.value} (user {self.user_id}): {e}")
            self.states[kind] = RequestState.FAILED
            self.errors[kind] = str(e) or "Failed to process AI request"
            raise

        self.states[kind] = RequestState.SUCCEEDED
        await self.refresh()
        return result

    async def generate_study_plan(self) -> dict[str, Any]:
        """Request a study plan with the dashboard's default settings."""
        target_date = self._clock() + PLAN_HORIZON
        return await self.run(
            AIRequestKind.STUDY_PLAN,
            {
                "subjects": list(DEFAULT_PLAN_SUBJECTS),
                "studyHours": DEFAULT_STUDY_HOURS,
                "targetDate": target_date.isoformat(),
            },
        )

    async def analyze_performance(self) -> dict[str, Any]:
        return await self.run(AIRequestKind.PERFORMANCE_ANALYSIS, {})
