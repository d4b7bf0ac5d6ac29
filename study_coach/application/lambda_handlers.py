# lambda_handlers.py
#
# POST /ai-assistant           -> ai_assistant_handler
# POST /generate-learning-path -> generate_learning_path_handler
#
# API Gateway proxy integration (REST or HTTP API). Providers are built on
# the first invocation and reused while the container stays warm. When the
# body has no userId, the JWT "sub" claim is used.

import asyncio
import base64
import json
import logging
from typing import Any, Awaitable, Callable, Optional

from ..domain.errors import InvalidRequestError
from ..infrastructure.local_quiz_session_repository import LocalQuizSessionRepository
from .config import CORS_HEADERS, settings
from .controller import StudyCoachController
from .providers import build_completion_client, build_row_store

logger = logging.getLogger(__name__)
logger.setLevel(settings.log_level.upper())

_controller: Optional[StudyCoachController] = None

Action = Callable[[StudyCoachController, Any], Awaitable[dict]]


def _get_controller() -> StudyCoachController:
    global _controller
    if _controller is None:
        _controller = StudyCoachController(
            row_store=build_row_store(settings),
            completion_client=build_completion_client(settings),
            quiz_repository=LocalQuizSessionRepository(),
            max_tokens=settings.llm_max_tokens,
        )
    return _controller


def _claims(event) -> dict:
    rc = event.get("requestContext") or {}
    auth = rc.get("authorizer") or {}
    jwt = auth.get("jwt") or {}
    return jwt.get("claims") or {}


def _method(event) -> str:
    method = event.get("httpMethod") or ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or "").upper()


def _body(event) -> Any:
    raw = event.get("body") or ""
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise InvalidRequestError("Request body must be valid JSON") from e

    sub = _claims(event).get("sub")
    if isinstance(body, dict) and sub and not body.get("userId"):
        body["userId"] = sub
    return body


def _response(status_code: int, payload: Optional[dict]) -> dict:
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": "" if payload is None else json.dumps(payload),
    }


def _handle(event, action: Action, label: str) -> dict:
    if _method(event) == "OPTIONS":
        return _response(200, None)

    try:
        body = _body(event)
        data = asyncio.run(action(_get_controller(), body))
        return _response(200, {"success": True, "data": data})
    except InvalidRequestError as e:
        return _response(400, {"success": False, "error": str(e)})
    except Exception as e:
        logger.error(f"Error in {label}: {e}", exc_info=True)
        return _response(500, {"success": False, "error": str(e) or "Internal server error"})


def ai_assistant_handler(event, context):
    return _handle(event, lambda controller, body: controller.handle_ai_request(body), "AI assistant")


def generate_learning_path_handler(event, context):
    return _handle(
        event,
        lambda controller, body: controller.generate_learning_path(body),
        "generate-learning-path",
    )
