"""Infrastructure layer components."""

from .bedrock_completion_client import BedrockCompletionClient, BedrockConfig
from .dynamodb_row_store import DynamoDBRowStore
from .local_quiz_session_repository import LocalQuizSessionRepository
from .local_row_store import LocalRowStore
from .openai_completion_client import OpenAICompletionClient
from .static_completion_client import StaticCompletionClient, UnconfiguredCompletionClient

__all__ = [
    "BedrockCompletionClient",
    "BedrockConfig",
    "DynamoDBRowStore",
    "LocalQuizSessionRepository",
    "LocalRowStore",
    "OpenAICompletionClient",
    "StaticCompletionClient",
    "UnconfiguredCompletionClient",
]
