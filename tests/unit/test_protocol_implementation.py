"""Test that infrastructure implementations conform to the domain protocols."""

from unittest.mock import patch

import pytest

from study_coach.domain.interfaces import CompletionClient, RowStore
from study_coach.infrastructure import (
    BedrockCompletionClient,
    DynamoDBRowStore,
    LocalRowStore,
    OpenAICompletionClient,
    StaticCompletionClient,
    UnconfiguredCompletionClient,
)

ROW_STORE_METHODS = [
    "find_user",
    "save_user",
    "insert_assessment",
    "list_assessments",
    "insert_learning_path",
    "list_learning_paths",
    "update_learning_path_progress",
    "insert_goal",
    "list_goals",
    "update_goal_progress",
    "insert_study_session",
    "list_study_sessions",
    "complete_study_session",
]


def test_local_row_store_implements_protocol():
    """Test that LocalRowStore implements the RowStore protocol."""
    store = LocalRowStore()

    assert isinstance(store, RowStore)
    for name in ROW_STORE_METHODS:
        assert callable(getattr(store, name))


def test_dynamodb_row_store_implements_protocol():
    """Test that DynamoDBRowStore implements the RowStore protocol."""
    with patch("study_coach.infrastructure.dynamodb_row_store.aioboto3.Session"):
        store = DynamoDBRowStore()

    assert isinstance(store, RowStore)
    for name in ROW_STORE_METHODS:
        assert callable(getattr(store, name))


@pytest.mark.parametrize(
    "client",
    [
        StaticCompletionClient(),
        UnconfiguredCompletionClient("missing key"),
        OpenAICompletionClient(api_key="test-key"),
    ],
)
def test_completion_clients_implement_protocol(client):
    assert isinstance(client, CompletionClient)


def test_bedrock_client_implements_protocol():
    with patch("study_coach.infrastructure.bedrock_completion_client.aioboto3.Session"):
        client = BedrockCompletionClient()

    assert isinstance(client, CompletionClient)
