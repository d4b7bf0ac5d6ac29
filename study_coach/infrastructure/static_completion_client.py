"""Offline completion clients for development and misconfigured deployments."""

import logging
from typing import Optional, Sequence

from ..domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


class StaticCompletionClient:
    """
    A stub CompletionClient that replays canned replies.

    Replies are returned in order; once they run out every call gets
    ``default_reply``. With the default empty reply every request takes the
    rule-based fallback path, which makes local runs work without any API key.
    """

    def __init__(self, replies: Optional[Sequence[str]] = None, default_reply: str = ""):
        self._replies = list(replies or [])
        self.default_reply = default_reply
        self.calls: list[tuple[str, str, Optional[int]]] = []

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: Optional[int] = None) -> str:
        self.calls.append((system_prompt, user_prompt, max_tokens))
        if self._replies:
            return self._replies.pop(0)
        logger.debug("StaticCompletionClient returning default reply")
        return self.default_reply


class UnconfiguredCompletionClient:
    """Stands in for a client whose secrets were missing at startup.

    Every call fails with the startup reason, so only the endpoints that need
    the completion API are affected.
    """

    def __init__(self, reason: str):
        self.reason = reason

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: Optional[int] = None) -> str:
        raise ConfigurationError(self.reason)
