"""FastAPI application entry point."""

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from ..domain.entities import AIRequestKind
from ..domain.errors import AnswerRequiredError, InvalidRequestError
from ..domain.services.question_bank import GENERAL_SUBJECT
from ..infrastructure.local_quiz_session_repository import LocalQuizSessionRepository
from .config import CORS_HEADERS, settings
from .controller import StudyCoachController
from .providers import build_completion_client, build_row_store
from .schemas import (
    AnswerRequest,
    GoalCreate,
    GoalProgressUpdate,
    PathProgressUpdate,
    ProfileUpdate,
    StartAssessmentRequest,
    StudySessionComplete,
    StudySessionCreate,
)

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize providers from settings
row_store = build_row_store(settings)
completion_client = build_completion_client(settings)
quiz_repository = LocalQuizSessionRepository()

# Initialize controller with injected dependencies
controller = StudyCoachController(
    row_store=row_store,
    completion_client=completion_client,
    quiz_repository=quiz_repository,
    max_tokens=settings.llm_max_tokens,
)


def _error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise InvalidRequestError("Request body must be valid JSON") from e


def _http_error(e: Exception) -> HTTPException:
    """Map a domain exception onto the REST status code for it."""
    if isinstance(e, AnswerRequiredError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, InvalidRequestError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=500, detail="Internal server error")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return controller.get_health_status()


# ===== AI endpoints =====


@app.options("/ai-assistant")
@app.options("/generate-learning-path")
async def preflight():
    """Answer bare CORS preflight requests."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/ai-assistant")
async def ai_assistant(request: Request):
    """Dispatch a typed AI request (study plan, explanation, analysis, learning path).

    Always answers with a ``{success, data | error}`` envelope.
    """
    try:
        body = await _read_json(request)
        data = await controller.handle_ai_request(body)
        return {"success": True, "data": data}
    except InvalidRequestError as e:
        return _error_envelope(400, str(e))
    except Exception as e:
        logger.error(f"Error in AI assistant: {e}", exc_info=True)
        return _error_envelope(500, str(e) or "Internal server error")


@app.post("/generate-learning-path")
async def generate_learning_path(request: Request):
    """Generate and store a detailed learning path."""
    try:
        body = await _read_json(request)
        data = await controller.generate_learning_path(body)
        return {"success": True, "data": data}
    except InvalidRequestError as e:
        return _error_envelope(400, str(e))
    except Exception as e:
        logger.error(f"Error in generate-learning-path: {e}", exc_info=True)
        return _error_envelope(500, str(e) or "Internal server error")


# ===== Assessments =====


@app.get("/assessments/questions")
async def get_questions(subject: str = Query(GENERAL_SUBJECT, description="Subject, or General for all")):
    """List the questions a quiz on ``subject`` would use, without answers."""
    try:
        return {"subject": subject, "questions": controller.list_questions(subject)}
    except InvalidRequestError as e:
        raise _http_error(e)


@app.post("/assessments")
async def start_assessment(body: StartAssessmentRequest):
    """Start a quiz and return its first question."""
    try:
        step = await controller.start_assessment(body.user_id, body.subject)
        return step.model_dump(mode="json")
    except InvalidRequestError as e:
        raise _http_error(e)


@app.post("/assessments/{quiz_id}/answer")
async def select_answer(quiz_id: str, body: AnswerRequest):
    try:
        step = await controller.select_answer(quiz_id, body.option)
        return step.model_dump(mode="json")
    except (InvalidRequestError, ValueError) as e:
        raise _http_error(e)


@app.post("/assessments/{quiz_id}/next")
async def next_question(quiz_id: str):
    """Advance the quiz; the last question completes and stores it."""
    try:
        step = await controller.next_question(quiz_id)
        return step.model_dump(mode="json")
    except (InvalidRequestError, ValueError) as e:
        raise _http_error(e)


@app.post("/assessments/{quiz_id}/previous")
async def previous_question(quiz_id: str):
    try:
        step = await controller.previous_question(quiz_id)
        return step.model_dump(mode="json")
    except (InvalidRequestError, ValueError) as e:
        raise _http_error(e)


# ===== Dashboard =====


@app.get("/dashboard/{user_id}")
async def get_dashboard(user_id: str):
    """Latest rows, stats and AI request states for a learner."""
    try:
        return await controller.get_dashboard(user_id)
    except Exception as e:
        logger.error(f"Error loading dashboard for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load dashboard data")


@app.post("/dashboard/{user_id}/study-plan")
async def dashboard_study_plan(user_id: str):
    """Generate a study plan with the dashboard defaults."""
    try:
        data = await controller.run_dashboard_request(user_id, AIRequestKind.STUDY_PLAN)
        return {"success": True, "data": data}
    except InvalidRequestError as e:
        return _error_envelope(400, str(e))
    except Exception as e:
        logger.error(f"Error generating study plan for user {user_id}: {e}", exc_info=True)
        return _error_envelope(500, str(e) or "Internal server error")


@app.post("/dashboard/{user_id}/performance-analysis")
async def dashboard_performance_analysis(user_id: str):
    """Analyze the learner's performance."""
    try:
        data = await controller.run_dashboard_request(user_id, AIRequestKind.PERFORMANCE_ANALYSIS)
        return {"success": True, "data": data}
    except InvalidRequestError as e:
        return _error_envelope(400, str(e))
    except Exception as e:
        logger.error(f"Error analyzing performance for user {user_id}: {e}", exc_info=True)
        return _error_envelope(500, str(e) or "Internal server error")


# ===== Profile, goals, study sessions, learning paths =====


@app.get("/profile/{user_id}")
async def get_profile(user_id: str):
    try:
        profile = await controller.get_profile(user_id)
        return profile.model_dump(mode="json")
    except ValueError as e:
        raise _http_error(e)


@app.put("/profile/{user_id}")
async def save_profile(user_id: str, body: ProfileUpdate):
    """Create or overwrite a learner's profile."""
    profile = await controller.save_profile(user_id, body)
    return profile.model_dump(mode="json")


@app.post("/goals", status_code=201)
async def create_goal(body: GoalCreate):
    goal = await controller.create_goal(body)
    return goal.model_dump(mode="json")


@app.patch("/goals/{goal_id}/progress")
async def update_goal_progress(goal_id: UUID, body: GoalProgressUpdate):
    """Report goal progress; reaching 100 completes the goal."""
    try:
        goal = await controller.update_goal_progress(goal_id, body)
        return goal.model_dump(mode="json")
    except ValueError as e:
        raise _http_error(e)


@app.post("/study-sessions", status_code=201)
async def create_study_session(body: StudySessionCreate):
    session = await controller.create_study_session(body)
    return session.model_dump(mode="json")


@app.post("/study-sessions/{session_id}/complete")
async def complete_study_session(session_id: UUID, body: Optional[StudySessionComplete] = None):
    """Mark a study session completed, optionally replacing its notes."""
    try:
        session = await controller.complete_study_session(session_id, body.notes if body else None)
        return session.model_dump(mode="json")
    except ValueError as e:
        raise _http_error(e)


@app.patch("/learning-paths/{path_id}/progress")
async def update_learning_path_progress(path_id: UUID, body: PathProgressUpdate):
    try:
        path = await controller.update_learning_path_progress(path_id, body)
        return path.model_dump(mode="json")
    except ValueError as e:
        raise _http_error(e)
