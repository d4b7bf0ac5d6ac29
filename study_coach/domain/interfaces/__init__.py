"""Domain interfaces for the study coach application."""

from .completion_client import CompletionClient
from .quiz_session_repository import QuizSessionRepository
from .row_store import RowStore

__all__ = ["CompletionClient", "QuizSessionRepository", "RowStore"]
