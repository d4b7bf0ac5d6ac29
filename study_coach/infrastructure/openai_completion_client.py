"""OpenAI-compatible chat-completion client over httpx."""

import logging
from typing import Optional

import httpx

from ..domain.errors import CompletionError

logger = logging.getLogger(__name__)


class OpenAICompletionClient:
    """CompletionClient for any endpoint speaking the OpenAI chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.7,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Bearer token for the API.
            model: Model name sent with every request.
            base_url: API root, without the ``/chat/completions`` suffix.
            temperature: Sampling temperature.
            timeout: Request timeout in seconds; None keeps the httpx default.
            transport: Optional httpx transport (used by tests).
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: Optional[int] = None) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        client_kwargs = {"base_url": self.base_url, "transport": self._transport}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.post(
                    "/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise CompletionError(
                f"Completion API returned {e.response.status_code}: {e.response.text[:300]}"
            ) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Completion API request failed: {e}") from e
        except ValueError as e:
            raise CompletionError("Completion API returned a non-JSON body") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionError("Completion API response has no choices") from e

        logger.debug(f"Completion from {self.model}: {len(content or '')} characters")
        return content or ""
