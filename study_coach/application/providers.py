"""Provider factories selecting infrastructure implementations from settings."""

import logging

from ..domain.interfaces.completion_client import CompletionClient
from ..domain.interfaces.row_store import RowStore
from ..infrastructure.bedrock_completion_client import BedrockCompletionClient, BedrockConfig
from ..infrastructure.dynamodb_row_store import DynamoDBRowStore
from ..infrastructure.local_row_store import LocalRowStore
from ..infrastructure.openai_completion_client import OpenAICompletionClient
from ..infrastructure.static_completion_client import StaticCompletionClient, UnconfiguredCompletionClient
from .config import Settings

logger = logging.getLogger(__name__)

MISSING_OPENAI_KEY = "OpenAI API key not configured"


def build_row_store(settings: Settings) -> RowStore:
    """Create the row store named by ``row_store_type``."""
    if settings.row_store_type == "dynamodb":
        logger.info(f"Using DynamoDB row store in {settings.aws_region}")
        return DynamoDBRowStore(
            users_table=settings.users_table_name,
            assessments_table=settings.assessments_table_name,
            learning_paths_table=settings.learning_paths_table_name,
            smart_goals_table=settings.smart_goals_table_name,
            study_sessions_table=settings.study_sessions_table_name,
            user_index_name=settings.user_index_name,
            region_name=settings.aws_region,
        )
    if settings.row_store_type != "local":
        raise ValueError(f"Unknown row store type: {settings.row_store_type}")
    logger.info("Using in-memory row store")
    return LocalRowStore()


def build_completion_client(settings: Settings) -> CompletionClient:
    """Create the completion client named by ``completion_provider``.

    A missing OpenAI key does not stop startup: the returned client fails
    every call with a ``ConfigurationError`` instead.
    """
    provider = settings.completion_provider
    if provider == "openai":
        if not settings.openai_api_key:
            logger.error(f"{MISSING_OPENAI_KEY}; AI endpoints will fail until OPENAI_API_KEY is set")
            return UnconfiguredCompletionClient(MISSING_OPENAI_KEY)
        return OpenAICompletionClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            temperature=settings.llm_temperature,
            timeout=settings.llm_timeout_seconds,
        )
    if provider == "bedrock":
        return BedrockCompletionClient(
            BedrockConfig(
                region=settings.aws_region,
                model_id=settings.bedrock_model_id,
                temperature=settings.llm_temperature,
                top_p=settings.llm_top_p,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                aws_session_token=settings.aws_session_token,
            )
        )
    if provider == "static":
        logger.warning("Using static completion client; AI replies will use rule-based fallbacks")
        return StaticCompletionClient()
    raise ValueError(f"Unknown completion provider: {provider}")
