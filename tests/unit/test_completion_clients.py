"""Unit tests for the completion clients."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from botocore.exceptions import ClientError

from study_coach.domain.errors import CompletionError, ConfigurationError
from study_coach.infrastructure.bedrock_completion_client import BedrockCompletionClient, BedrockConfig
from study_coach.infrastructure.openai_completion_client import OpenAICompletionClient
from study_coach.infrastructure.static_completion_client import (
    StaticCompletionClient,
    UnconfiguredCompletionClient,
)


def chat_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestOpenAICompletionClient:
    """OpenAI chat-completions client over a mocked transport."""

    @pytest.mark.asyncio
    async def test_sends_chat_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_reply('{"ok": true}'))

        client = OpenAICompletionClient(
            api_key="sk-test",
            base_url="https://llm.example.com/v1/",
            transport=httpx.MockTransport(handler),
        )

        reply = await client.complete("You are a tutor.", "Explain limits.", max_tokens=1500)

        assert reply == '{"ok": true}'
        assert seen["url"] == "https://llm.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"]["model"] == "gpt-4o-mini"
        assert seen["body"]["temperature"] == 0.7
        assert seen["body"]["max_tokens"] == 1500
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "You are a tutor."},
            {"role": "user", "content": "Explain limits."},
        ]

    @pytest.mark.asyncio
    async def test_max_tokens_omitted_when_unset(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=chat_reply("hi"))

        client = OpenAICompletionClient(api_key="sk-test", transport=httpx.MockTransport(handler))

        await client.complete("system", "user")

        assert "max_tokens" not in bodies[0]

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = OpenAICompletionClient(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(500, text="upstream exploded")),
        )

        with pytest.raises(CompletionError, match="returned 500: upstream exploded"):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_missing_choices_raises(self):
        client = OpenAICompletionClient(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})),
        )

        with pytest.raises(CompletionError, match="no choices"):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self):
        client = OpenAICompletionClient(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
        )

        with pytest.raises(CompletionError, match="non-JSON"):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = OpenAICompletionClient(api_key="sk-test", transport=httpx.MockTransport(handler))

        with pytest.raises(CompletionError, match="request failed"):
            await client.complete("system", "user")

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty_string(self):
        client = OpenAICompletionClient(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=chat_reply(None))),
        )

        assert await client.complete("system", "user") == ""


@pytest.fixture
def mock_bedrock_client():
    """Create a mock bedrock-runtime client."""
    return MagicMock()


@pytest.fixture
def mock_aioboto3_session(mock_bedrock_client):
    """Create a mock aioboto3 session."""
    with patch("study_coach.infrastructure.bedrock_completion_client.aioboto3.Session") as mock_session_class:
        mock_session_instance = MagicMock()
        mock_session_class.return_value = mock_session_instance

        # Setup async context manager for client
        mock_session_instance.client.return_value.__aenter__ = AsyncMock(return_value=mock_bedrock_client)
        mock_session_instance.client.return_value.__aexit__ = AsyncMock(return_value=None)

        yield mock_session_instance


class TestBedrockCompletionClient:
    """Bedrock converse client with a mocked aioboto3 session."""

    def test_config_defaults(self):
        config = BedrockConfig()

        assert config.region == "us-east-1"
        assert config.model_id == "amazon.nova-lite-v1:0"
        assert config.temperature == 0.7
        assert config.top_p == 0.9
        assert config.aws_access_key_id is None

    @pytest.mark.asyncio
    async def test_converse_request_and_reply(self, mock_aioboto3_session, mock_bedrock_client):
        mock_bedrock_client.converse = AsyncMock(
            return_value={"output": {"message": {"content": [{"text": '{"concept": '}, {"text": '"x"}'}]}}}
        )
        client = BedrockCompletionClient(BedrockConfig(region="us-west-2", model_id="test-model"))

        reply = await client.complete("system text", "user text", max_tokens=2000)

        assert reply == '{"concept": "x"}'
        mock_aioboto3_session.client.assert_called_once_with("bedrock-runtime", region_name="us-west-2")
        kwargs = mock_bedrock_client.converse.call_args.kwargs
        assert kwargs["modelId"] == "test-model"
        assert kwargs["system"] == [{"text": "system text"}]
        assert kwargs["messages"] == [{"role": "user", "content": [{"text": "user text"}]}]
        assert kwargs["inferenceConfig"] == {"temperature": 0.7, "topP": 0.9, "maxTokens": 2000}

    @pytest.mark.asyncio
    async def test_client_error_raises(self, mock_aioboto3_session, mock_bedrock_client):
        mock_bedrock_client.converse = AsyncMock(
            side_effect=ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "Converse")
        )
        client = BedrockCompletionClient()

        with pytest.raises(CompletionError, match="Bedrock converse failed"):
            await client.complete("system", "user")


class TestOfflineClients:
    """Static and unconfigured clients."""

    @pytest.mark.asyncio
    async def test_static_replays_then_defaults(self):
        client = StaticCompletionClient(replies=["first"], default_reply="fallback")

        assert await client.complete("s", "u1", max_tokens=10) == "first"
        assert await client.complete("s", "u2") == "fallback"
        assert client.calls == [("s", "u1", 10), ("s", "u2", None)]

    @pytest.mark.asyncio
    async def test_unconfigured_raises(self):
        client = UnconfiguredCompletionClient("OpenAI API key not configured")

        with pytest.raises(ConfigurationError, match="OpenAI API key not configured"):
            await client.complete("s", "u")
