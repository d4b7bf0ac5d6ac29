"""Chat-completion client protocol."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CompletionClient(Protocol):
    """Protocol for hosted chat-completion APIs.

    One call to ``complete`` is one request to the hosted model. The reply is
    returned as raw text; parsing is the caller's concern.
    """

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: Optional[int] = None) -> str:
        """Send a system + user message pair and return the reply text.

        Raises:
            CompletionError: If the API cannot be reached or answers with an error.
            ConfigurationError: If required credentials are missing.
        """
        ...
