"""AI assistant service dispatching typed requests to the completion API."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..entities.ai_replies import (
    AdaptiveLearningPath,
    GeneratedLearningPath,
    PerformanceAnalysis,
    QuestionExplanation,
    StudyPlan,
)
from ..entities.ai_requests import (
    DEFAULT_PLAN_SUBJECTS,
    AdaptivePathInput,
    AIRequest,
    AIRequestKind,
    ExplanationInput,
    LearningPathRequest,
    PerformanceAnalysisInput,
    StudyPlanInput,
)
from ..entities.assessment import DifficultyLevel
from ..entities.learning_path import LearningPath
from ..entities.user_profile import utc_now
from ..errors import InvalidRequestError
from ..interfaces.completion_client import CompletionClient
from ..interfaces.row_store import RowStore
from . import fallbacks, prompts
from .performance import build_performance_analysis
from .recommendations import (
    calculate_optimal_duration,
    calculate_path_duration,
    determine_difficulty_level,
    extract_subjects_from_goal,
    scores_by_subject,
)
from .reply_parsing import FallbackReply, parse_reply

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

PLAN_HORIZON = timedelta(days=90)
RECENT_ASSESSMENTS_FOR_PLAN = 5
RECENT_ASSESSMENTS_FOR_PATH = 10
RECENT_STUDY_SESSIONS = 50

MAX_TOKENS = {
    AIRequestKind.STUDY_PLAN: 2000,
    AIRequestKind.QUESTION_EXPLANATION: 1500,
    AIRequestKind.PERFORMANCE_ANALYSIS: 2000,
    AIRequestKind.LEARNING_PATH: 2000,
}
CUSTOM_PATH_MAX_TOKENS = 3000

STUDY_PLAN_DESCRIPTION = "AI-generated study plan based on performance analysis"
PERFORMANCE_PATH_TITLE = "Performance Improvement Path"


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _parse_input(model: Type[_M], data: dict[str, Any], kind: str) -> _M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "data"
        raise InvalidRequestError(f"Invalid {kind} data: {location}: {first.get('msg')}") from e


class AIAssistantService:
    """
    Handles AI assistant requests for one process.

    Each request makes exactly one completion call. Replies that cannot be
    parsed are replaced by a rule-based object built from the same rows,
    so a bad reply degrades the answer instead of failing the request.
    Study plans, analyses and learning paths are persisted as one
    ``learning_paths`` row each; explanations are not persisted.
    """

    def __init__(
        self,
        row_store: RowStore,
        completion_client: CompletionClient,
        clock: Callable[[], datetime] = utc_now,
        max_tokens: Optional[int] = None,
    ):
        """
        Args:
            row_store: Store for profiles, assessments and learning paths.
            completion_client: Client for the hosted completion API.
            clock: Source of the current time.
            max_tokens: Upper bound on the per-request completion budget.
        """
        self.row_store = row_store
        self.completion_client = completion_client
        self.max_tokens = max_tokens
        self._clock = clock

    async def handle(self, request: AIRequest) -> dict[str, Any]:
        """Dispatch a request by kind and return its wire-ready result.

        Raises:
            InvalidRequestError: If ``data`` does not fit the request kind.
            CompletionError: If the completion API call fails.
            ConfigurationError: If the completion client is not configured.
        """
        logger.info(f"Processing AI request: {request.type.value} for user {request.user_id}")

        if request.type is AIRequestKind.STUDY_PLAN:
            data = _parse_input(StudyPlanInput, request.data, request.type.value)
            return await self.generate_study_plan(request.user_id, data)
        if request.type is AIRequestKind.QUESTION_EXPLANATION:
            data = _parse_input(ExplanationInput, request.data, request.type.value)
            return await self.explain_question(data)
        if request.type is AIRequestKind.PERFORMANCE_ANALYSIS:
            _parse_input(PerformanceAnalysisInput, request.data, request.type.value)
            return await self.analyze_performance(request.user_id)
        if request.type is AIRequestKind.LEARNING_PATH:
            data = _parse_input(AdaptivePathInput, request.data, request.type.value)
            return await self.generate_learning_path(request.user_id, data)

        raise InvalidRequestError(f"Unsupported AI request type: {request.type}")

    async def generate_study_plan(self, user_id: str, data: StudyPlanInput) -> dict[str, Any]:
        now = self._clock()
        if not data.subjects:
            data = data.model_copy(update={"subjects": list(DEFAULT_PLAN_SUBJECTS)})
        target_date = _as_aware(data.target_date) if data.target_date else now + PLAN_HORIZON

        profile = await self.row_store.find_user(user_id)
        assessments = await self.row_store.list_assessments(user_id, limit=RECENT_ASSESSMENTS_FOR_PLAN)

        plan = await self._complete(
            AIRequestKind.STUDY_PLAN.value,
            prompts.STUDY_PLAN_SYSTEM,
            prompts.study_plan_prompt(profile, assessments, data, target_date),
            StudyPlan,
            MAX_TOKENS[AIRequestKind.STUDY_PLAN],
            lambda raw: fallbacks.build_study_plan(profile, assessments, data, target_date, now),
        )

        row = await self.row_store.insert_learning_path(
            LearningPath(
                user_id=user_id,
                title=plan.title,
                description=STUDY_PLAN_DESCRIPTION,
                subjects=[subject.name for subject in plan.subjects],
                difficulty_level=determine_difficulty_level(assessments),
                estimated_duration=plan.duration,
                progress=0,
            )
        )
        logger.info(f"Study plan {row.id} saved for user {user_id}")
        return {**plan.to_wire(), "id": str(row.id)}

    async def explain_question(self, data: ExplanationInput) -> dict[str, Any]:
        explanation = await self._complete(
            AIRequestKind.QUESTION_EXPLANATION.value,
            prompts.EXPLANATION_SYSTEM,
            prompts.explanation_prompt(data),
            QuestionExplanation,
            MAX_TOKENS[AIRequestKind.QUESTION_EXPLANATION],
            lambda raw: fallbacks.build_explanation(data, raw),
        )
        return explanation.to_wire()

    async def analyze_performance(self, user_id: str) -> dict[str, Any]:
        assessments = await self.row_store.list_assessments(user_id)
        sessions = await self.row_store.list_study_sessions(user_id, limit=RECENT_STUDY_SESSIONS)

        analysis = await self._complete(
            AIRequestKind.PERFORMANCE_ANALYSIS.value,
            prompts.ANALYSIS_SYSTEM,
            prompts.performance_prompt(assessments, sessions),
            PerformanceAnalysis,
            MAX_TOKENS[AIRequestKind.PERFORMANCE_ANALYSIS],
            lambda raw: build_performance_analysis(assessments, sessions),
        )

        subjects = analysis.strengths_and_weaknesses.weaknesses or list(scores_by_subject(assessments))
        row = await self.row_store.insert_learning_path(
            LearningPath(
                user_id=user_id,
                title=PERFORMANCE_PATH_TITLE,
                description=f"Remediation plan from performance analysis ({analysis.overall_progress.overall}% overall)",
                subjects=subjects,
                difficulty_level=determine_difficulty_level(assessments),
                estimated_duration=calculate_optimal_duration(assessments),
                progress=0,
            )
        )
        logger.info(f"Performance analysis {row.id} saved for user {user_id}")
        return {**analysis.to_wire(), "id": str(row.id)}

    async def generate_learning_path(self, user_id: str, data: AdaptivePathInput) -> dict[str, Any]:
        duration_days = calculate_path_duration(data.timeframe)
        profile = await self.row_store.find_user(user_id)

        path = await self._complete(
            AIRequestKind.LEARNING_PATH.value,
            prompts.LEARNING_PATH_SYSTEM,
            prompts.adaptive_path_prompt(profile, data, duration_days),
            AdaptiveLearningPath,
            MAX_TOKENS[AIRequestKind.LEARNING_PATH],
            lambda raw: fallbacks.build_adaptive_path(profile, data, duration_days),
        )

        row = await self.row_store.insert_learning_path(
            LearningPath(
                user_id=user_id,
                title=path.title,
                description=f"Adaptive learning path for {data.target_goal}",
                subjects=extract_subjects_from_goal(data.target_goal),
                difficulty_level=data.current_level,
                estimated_duration=duration_days,
                progress=0,
            )
        )
        logger.info(f"Adaptive learning path {row.id} saved for user {user_id}")
        return {**path.to_wire(), "id": str(row.id)}

    async def generate_custom_learning_path(self, request: LearningPathRequest) -> dict[str, Any]:
        """Generate, persist and return a detailed learning path.

        When the request carries only assessment results, the subjects,
        difficulty and learning style are derived from those results.
        """
        request = self._resolve_path_request(request)
        logger.info(f"Generating learning path for user {request.user_id}: {', '.join(request.subjects)}")

        profile = await self.row_store.find_user(request.user_id)
        assessments = await self.row_store.list_assessments(request.user_id, limit=RECENT_ASSESSMENTS_FOR_PATH)

        path = await self._complete(
            "generate-learning-path",
            prompts.LEARNING_PATH_SYSTEM,
            prompts.learning_path_prompt(request, profile, assessments),
            GeneratedLearningPath,
            CUSTOM_PATH_MAX_TOKENS,
            lambda raw: fallbacks.build_generated_path(request),
        )

        row = await self.row_store.insert_learning_path(
            LearningPath(
                user_id=request.user_id,
                title=path.title,
                description=path.description,
                subjects=list(request.subjects),
                difficulty_level=request.difficulty_level.value,
                estimated_duration=path.total_duration,
                progress=0,
            )
        )
        logger.info(f"Learning path generated and saved for user {request.user_id}")
        return {**path.to_wire(), "id": str(row.id), "created_at": row.created_at.isoformat()}

    @staticmethod
    def _resolve_path_request(request: LearningPathRequest) -> LearningPathRequest:
        if request.subjects:
            return request

        results = request.assessment_results
        update: dict[str, Any] = {"subjects": list(dict.fromkeys(result.subject for result in results))}
        stated_levels = [result.difficulty_level for result in results if result.difficulty_level]
        if stated_levels and stated_levels[0] in {level.value for level in DifficultyLevel}:
            update["difficulty_level"] = DifficultyLevel(stated_levels[0])
        else:
            update["difficulty_level"] = DifficultyLevel(determine_difficulty_level(results))
        styles = [result.learning_style for result in results if result.learning_style]
        if styles:
            update["learning_style"] = styles[0]
        if not request.target_goal:
            update["target_goal"] = f"Improve in {', '.join(update['subjects'])}"
        return request.model_copy(update=update)

    async def _complete(
        self,
        kind: str,
        system_prompt: str,
        user_prompt: str,
        model: Type[_M],
        max_tokens: Optional[int],
        fallback: Callable[[str], _M],
    ) -> _M:
        """Make the single completion call for a request and parse its reply."""
        if self.max_tokens is not None and max_tokens is not None:
            max_tokens = min(max_tokens, self.max_tokens)
        reply = await self.completion_client.complete(system_prompt, user_prompt, max_tokens=max_tokens)
        outcome = parse_reply(reply, model)
        if isinstance(outcome, FallbackReply):
            logger.warning(f"Using rule-based {kind} result: {outcome.reason}")
            return fallback(outcome.raw_text)
        return outcome.value
