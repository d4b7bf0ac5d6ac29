"""Application configuration using Pydantic Settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "study-coach"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Row store: "local" or "dynamodb"
    row_store_type: str = "local"

    # AWS settings for the DynamoDB row store and Bedrock
    aws_region: str = "us-east-1"
    users_table_name: str = "users"
    assessments_table_name: str = "assessments"
    learning_paths_table_name: str = "learning_paths"
    smart_goals_table_name: str = "smart_goals"
    study_sessions_table_name: str = "study_sessions"
    user_index_name: str = "UserIndex"

    # AWS credentials (optional, uses default credential chain if not set)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    # Completion provider: "openai", "bedrock" or "static"
    completion_provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    bedrock_model_id: str = "amazon.nova-lite-v1:0"
    llm_temperature: float = 0.7
    llm_top_p: float = 0.9
    llm_max_tokens: int = 3000
    llm_timeout_seconds: Optional[float] = 60.0


# Headers answering CORS preflight requests outside the middleware
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

# Create a singleton instance
settings = Settings()
