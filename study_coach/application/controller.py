"""Study Coach Controller for handling business logic and coordination."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import UUID

from pydantic import ValidationError

from ..domain.entities import (
    AIRequest,
    AIRequestKind,
    LearningPath,
    LearningPathRequest,
    QuizStep,
    SmartGoal,
    StudySession,
    UserProfile,
)
from ..domain.entities.assessment import AssessmentResult
from ..domain.entities.user_profile import utc_now
from ..domain.errors import InvalidRequestError
from ..domain.interfaces.completion_client import CompletionClient
from ..domain.interfaces.quiz_session_repository import QuizSessionRepository
from ..domain.interfaces.row_store import RowStore
from ..domain.services import AIAssistantService, AssessmentService, DashboardService, start_quiz
from ..domain.services.question_bank import select_questions
from .schemas import (
    GoalCreate,
    GoalProgressUpdate,
    PathProgressUpdate,
    ProfileUpdate,
    StudySessionCreate,
)

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


class StudyCoachController:
    """
    Controller for coordinating study coach operations.

    This controller is injected with all necessary providers and handles
    the business logic for each endpoint, keeping the API and Lambda
    layers thin.
    """

    def __init__(
        self,
        row_store: RowStore,
        completion_client: CompletionClient,
        quiz_repository: QuizSessionRepository,
        max_tokens: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            row_store: Store for all persistent rows
            completion_client: Client for the hosted completion API
            quiz_repository: Repository for in-progress quizzes
            max_tokens: Upper bound on completion tokens per request
            clock: Source of the current time
        """
        self.row_store = row_store
        self.completion_client = completion_client
        self.quiz_repository = quiz_repository
        self.assistant = AIAssistantService(row_store, completion_client, clock=clock, max_tokens=max_tokens)
        self._clock = clock
        self._dashboards: dict[str, DashboardService] = {}

        logger.info("StudyCoachController initialized with providers")

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "providers": {
                "row_store": type(self.row_store).__name__,
                "completion_client": type(self.completion_client).__name__,
                "quiz_repository": type(self.quiz_repository).__name__,
            },
        }

    # ===== AI assistant =====

    async def handle_ai_request(self, body: Any) -> dict[str, Any]:
        """
        Validate an ``ai-assistant`` body and dispatch it.

        Raises:
            InvalidRequestError: If the body is not a valid request.
        """
        try:
            request = AIRequest.model_validate(body)
        except ValidationError as e:
            raise InvalidRequestError(_validation_message(e)) from e
        return await self.assistant.handle(request)

    async def generate_learning_path(self, body: Any) -> dict[str, Any]:
        """
        Validate a ``generate-learning-path`` body and generate the path.

        Raises:
            InvalidRequestError: If the body is not a valid request.
        """
        try:
            request = LearningPathRequest.model_validate(body)
        except ValidationError as e:
            raise InvalidRequestError(_validation_message(e)) from e
        return await self.assistant.generate_custom_learning_path(request)

    # ===== Assessments =====

    def list_questions(self, subject: str) -> list[dict]:
        return [question.public_view().model_dump(mode="json") for question in select_questions(subject)]

    async def start_assessment(self, user_id: str, subject: str) -> QuizStep:
        quiz = start_quiz(user_id, subject, clock=self._clock)
        await self.quiz_repository.save_session(quiz)
        logger.info(f"Started {subject} quiz {quiz.id} for user {user_id}")
        return self._assessment_service(quiz).current_step()

    async def select_answer(self, quiz_id: str, option: int) -> QuizStep:
        service = await self._load_assessment(quiz_id)
        step = service.select_answer(option)
        await self.quiz_repository.update_session(service.quiz)
        return step

    async def next_question(self, quiz_id: str) -> QuizStep:
        service = await self._load_assessment(quiz_id)
        step = await service.next()
        await self.quiz_repository.update_session(service.quiz)
        return step

    async def previous_question(self, quiz_id: str) -> QuizStep:
        service = await self._load_assessment(quiz_id)
        step = service.previous()
        await self.quiz_repository.update_session(service.quiz)
        return step

    async def _load_assessment(self, quiz_id: str) -> AssessmentService:
        quiz = await self.quiz_repository.get_session(quiz_id)
        return self._assessment_service(quiz)

    def _assessment_service(self, quiz) -> AssessmentService:
        async def refresh_dashboard(result: AssessmentResult) -> None:
            dashboard = self._dashboards.get(quiz.user_id)
            if dashboard is not None:
                await dashboard.refresh()

        return AssessmentService(quiz, self.row_store, clock=self._clock, on_complete=refresh_dashboard)

    # ===== Dashboard =====

    def _dashboard(self, user_id: str) -> DashboardService:
        if user_id not in self._dashboards:
            self._dashboards[user_id] = DashboardService(user_id, self.row_store, self.assistant, clock=self._clock)
        return self._dashboards[user_id]

    async def get_dashboard(self, user_id: str) -> dict[str, Any]:
        dashboard = self._dashboard(user_id)
        snapshot = await dashboard.refresh()
        return {
            **snapshot.model_dump(mode="json"),
            "display_name": snapshot.display_name,
            "requests": {
                kind.value: {"state": dashboard.states[kind].value, "error": dashboard.errors[kind]}
                for kind in AIRequestKind
            },
        }

    async def run_dashboard_request(self, user_id: str, kind: AIRequestKind) -> dict[str, Any]:
        """Run one of the dashboard's AI actions with its default settings."""
        dashboard = self._dashboard(user_id)
        if kind is AIRequestKind.STUDY_PLAN:
            return await dashboard.generate_study_plan()
        if kind is AIRequestKind.PERFORMANCE_ANALYSIS:
            return await dashboard.analyze_performance()
        raise InvalidRequestError(f"The dashboard cannot run {kind.value} requests")

    # ===== Profile, goals, sessions, paths =====

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Raises:
            ValueError: If the user has no profile.
        """
        profile = await self.row_store.find_user(user_id)
        if profile is None:
            raise ValueError(f"User with id {user_id} not found")
        return profile

    async def save_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        profile = UserProfile(id=user_id, **update.model_dump())
        return await self.row_store.save_user(profile)

    async def create_goal(self, body: GoalCreate) -> SmartGoal:
        return await self.row_store.insert_goal(SmartGoal(**body.model_dump()))

    async def update_goal_progress(self, goal_id: UUID, update: GoalProgressUpdate) -> SmartGoal:
        return await self.row_store.update_goal_progress(goal_id, update.progress, update.status)

    async def create_study_session(self, body: StudySessionCreate) -> StudySession:
        return await self.row_store.insert_study_session(StudySession(**body.model_dump()))

    async def complete_study_session(self, session_id: UUID, notes: Optional[str] = None) -> StudySession:
        return await self.row_store.complete_study_session(session_id, notes)

    async def update_learning_path_progress(self, path_id: UUID, update: PathProgressUpdate) -> LearningPath:
        return await self.row_store.update_learning_path_progress(path_id, update.progress)
