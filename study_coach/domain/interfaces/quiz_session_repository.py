"""Quiz session repository interface."""

from typing import Protocol

from ..entities.quiz_session import QuizSession


class QuizSessionRepository(Protocol):
    """Protocol defining the interface for quiz session repositories."""

    async def save_session(self, session: QuizSession) -> None:
        """Save a quiz session to the repository."""
        ...

    async def get_session(self, session_id: str) -> QuizSession:
        """Retrieve a quiz session by ID.

        Raises:
            ValueError: If the session is not found.
        """
        ...

    async def update_session(self, session: QuizSession) -> None:
        """Update an existing quiz session.

        Raises:
            ValueError: If the session is not found.
        """
        ...

    async def delete_session(self, session_id: str) -> None:
        """Delete a quiz session.

        Raises:
            ValueError: If the session is not found.
        """
        ...
