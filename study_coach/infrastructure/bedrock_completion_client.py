"""Amazon Bedrock chat-completion client using the Converse API."""

import logging
from dataclasses import dataclass
from typing import Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from ..domain.errors import CompletionError

logger = logging.getLogger(__name__)


@dataclass
class BedrockConfig:
    """Configuration for the Bedrock completion client."""
    region: str = "us-east-1"
    model_id: str = "amazon.nova-lite-v1:0"
    temperature: float = 0.7
    top_p: float = 0.9
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None


class BedrockCompletionClient:
    """CompletionClient backed by ``bedrock-runtime`` ``converse``."""

    def __init__(self, config: Optional[BedrockConfig] = None):
        self.config = config or BedrockConfig()
        self._session = aioboto3.Session(
            aws_access_key_id=self.config.aws_access_key_id,
            aws_secret_access_key=self.config.aws_secret_access_key,
            aws_session_token=self.config.aws_session_token,
        )

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: Optional[int] = None) -> str:
        inference = {"temperature": self.config.temperature, "topP": self.config.top_p}
        if max_tokens is not None:
            inference["maxTokens"] = max_tokens

        try:
            async with self._session.client("bedrock-runtime", region_name=self.config.region) as client:
                response = await client.converse(
                    modelId=self.config.model_id,
                    system=[{"text": system_prompt}],
                    messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                    inferenceConfig=inference,
                )
        except (ClientError, BotoCoreError) as e:
            raise CompletionError(f"Bedrock converse failed: {e}") from e

        blocks = response.get("output", {}).get("message", {}).get("content", [])
        text = "".join(block.get("text", "") for block in blocks)
        logger.debug(f"Completion from {self.config.model_id}: {len(text)} characters")
        return text
