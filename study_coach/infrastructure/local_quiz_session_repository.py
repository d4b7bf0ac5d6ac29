"""Local in-memory implementation of the quiz session repository."""

from typing import Dict

from ..domain.entities.quiz_session import QuizSession
from ..domain.interfaces.quiz_session_repository import QuizSessionRepository


class LocalQuizSessionRepository(QuizSessionRepository):
    """Local in-memory implementation of the QuizSessionRepository.

    Quizzes live only as long as the process, the same way the browser
    kept quiz state in memory.
    """

    def __init__(self):
        """Initialize the repository with an empty dictionary."""
        self._sessions: Dict[str, QuizSession] = {}

    async def save_session(self, session: QuizSession) -> None:
        self._sessions[str(session.id)] = session

    async def get_session(self, session_id: str) -> QuizSession:
        """Retrieve a quiz session by ID.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Quiz session with id {session_id} not found")

        return self._sessions[session_id]

    async def update_session(self, session: QuizSession) -> None:
        """Update an existing quiz session.

        Raises:
            ValueError: If the session is not found.
        """
        if str(session.id) not in self._sessions:
            raise ValueError(f"Quiz session with id {session.id} not found")

        self._sessions[str(session.id)] = session

    async def delete_session(self, session_id: str) -> None:
        """Delete a quiz session.

        Raises:
            ValueError: If the session is not found.
        """
        if session_id not in self._sessions:
            raise ValueError(f"Quiz session with id {session_id} not found")

        del self._sessions[session_id]

    def clear(self) -> None:
        """Clear all quiz sessions."""
        self._sessions.clear()

    async def list_sessions(self) -> list[QuizSession]:
        """List all quiz sessions."""
        return list(self._sessions.values())
