"""DynamoDB implementation of the RowStore."""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Type, TypeVar
from uuid import UUID

import aioboto3
from boto3.dynamodb.conditions import Key
from pydantic import BaseModel

from ..domain.entities.assessment import Assessment
from ..domain.entities.learning_path import LearningPath
from ..domain.entities.smart_goal import GoalStatus, SmartGoal
from ..domain.entities.study_session import StudySession
from ..domain.entities.user_profile import UserProfile, utc_now
from ..domain.interfaces.row_store import RowStore

logger = logging.getLogger(__name__)

_Model = TypeVar("_Model", bound=BaseModel)


class DynamoDBRowStore(RowStore):
    """DynamoDB row store with one table per entity.

    Every table is keyed by ``id``. Per-user listings go through a global
    secondary index (``user_index_name``) whose partition key is ``user_id``
    and whose sort key is the table's timestamp attribute.
    """

    def __init__(
        self,
        users_table: str = "users",
        assessments_table: str = "assessments",
        learning_paths_table: str = "learning_paths",
        smart_goals_table: str = "smart_goals",
        study_sessions_table: str = "study_sessions",
        user_index_name: str = "UserIndex",
        region_name: str = "us-east-1",
    ):
        """Initialize the DynamoDB row store.

        Args:
            users_table: Table holding user profiles.
            assessments_table: Table holding assessments.
            learning_paths_table: Table holding learning paths.
            smart_goals_table: Table holding SMART goals.
            study_sessions_table: Table holding study sessions.
            user_index_name: GSI on ``user_id`` present on every non-user table.
            region_name: AWS region name (default: us-east-1).
        """
        self.users_table = users_table
        self.assessments_table = assessments_table
        self.learning_paths_table = learning_paths_table
        self.smart_goals_table = smart_goals_table
        self.study_sessions_table = study_sessions_table
        self.user_index_name = user_index_name
        self.region_name = region_name
        self._session = aioboto3.Session()

    # ===== users =====

    async def find_user(self, user_id: str) -> Optional[UserProfile]:
        item = await self._get_item(self.users_table, user_id)
        return None if item is None else UserProfile.model_validate(item)

    async def save_user(self, profile: UserProfile) -> UserProfile:
        existing = await self.find_user(profile.id)
        if existing is not None:
            profile = profile.model_copy(update={"created_at": existing.created_at, "updated_at": utc_now()})
        await self._put_item(self.users_table, profile)
        return profile

    # ===== assessments =====

    async def insert_assessment(self, assessment: Assessment) -> Assessment:
        await self._put_item(self.assessments_table, assessment)
        return assessment

    async def list_assessments(self, user_id: str, limit: Optional[int] = None) -> list[Assessment]:
        return await self._query_user(self.assessments_table, Assessment, user_id, limit)

    # ===== learning paths =====

    async def insert_learning_path(self, path: LearningPath) -> LearningPath:
        await self._put_item(self.learning_paths_table, path)
        return path

    async def list_learning_paths(self, user_id: str, limit: Optional[int] = None) -> list[LearningPath]:
        return await self._query_user(self.learning_paths_table, LearningPath, user_id, limit)

    async def update_learning_path_progress(self, path_id: UUID, progress: int) -> LearningPath:
        item = await self._get_item(self.learning_paths_table, str(path_id))
        if item is None:
            raise ValueError(f"Learning path with id {path_id} not found")

        updated = LearningPath.model_validate(item).with_progress(progress)
        await self._put_item(self.learning_paths_table, updated)
        return updated

    # ===== goals =====

    async def insert_goal(self, goal: SmartGoal) -> SmartGoal:
        await self._put_item(self.smart_goals_table, goal)
        return goal

    async def list_goals(self, user_id: str, limit: Optional[int] = None) -> list[SmartGoal]:
        return await self._query_user(self.smart_goals_table, SmartGoal, user_id, limit)

    async def update_goal_progress(
        self, goal_id: UUID, progress: int, status: Optional[GoalStatus] = None
    ) -> SmartGoal:
        item = await self._get_item(self.smart_goals_table, str(goal_id))
        if item is None:
            raise ValueError(f"Goal with id {goal_id} not found")

        updated = SmartGoal.model_validate(item).with_progress(progress, status)
        await self._put_item(self.smart_goals_table, updated)
        return updated

    # ===== study sessions =====

    async def insert_study_session(self, session: StudySession) -> StudySession:
        await self._put_item(self.study_sessions_table, session)
        return session

    async def list_study_sessions(self, user_id: str, limit: Optional[int] = None) -> list[StudySession]:
        return await self._query_user(self.study_sessions_table, StudySession, user_id, limit)

    async def complete_study_session(self, session_id: UUID, notes: Optional[str] = None) -> StudySession:
        item = await self._get_item(self.study_sessions_table, str(session_id))
        if item is None:
            raise ValueError(f"Study session with id {session_id} not found")

        updated = StudySession.model_validate(item).mark_completed(notes)
        await self._put_item(self.study_sessions_table, updated)
        return updated

    # ===== item helpers =====

    async def _get_item(self, table_name: str, row_id: str) -> Optional[Dict[str, Any]]:
        async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
            table = await dynamodb.Table(table_name)
            response = await table.get_item(Key={"id": row_id})

        if "Item" not in response:
            return None
        return self._item_to_row(response["Item"])

    async def _put_item(self, table_name: str, row: BaseModel) -> None:
        async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
            table = await dynamodb.Table(table_name)
            await table.put_item(Item=self._row_to_item(row))
        logger.debug(f"Stored row {getattr(row, 'id', '?')} in {table_name}")

    async def _query_user(
        self,
        table_name: str,
        model: Type[_Model],
        user_id: str,
        limit: Optional[int],
    ) -> list[_Model]:
        """Query a table's user index, newest first, following pagination."""
        query: Dict[str, Any] = {
            "IndexName": self.user_index_name,
            "KeyConditionExpression": Key("user_id").eq(user_id),
            "ScanIndexForward": False,
        }
        if limit is not None:
            query["Limit"] = limit

        rows: list[_Model] = []
        async with self._session.resource("dynamodb", region_name=self.region_name) as dynamodb:
            table = await dynamodb.Table(table_name)
            while True:
                response = await table.query(**query)
                rows.extend(model.model_validate(self._item_to_row(item)) for item in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key or (limit is not None and len(rows) >= limit):
                    break
                query["ExclusiveStartKey"] = last_key

        return rows if limit is None else rows[:limit]

    def _row_to_item(self, row: BaseModel) -> Dict[str, Any]:
        """Convert an entity to a DynamoDB item.

        UUIDs and datetimes become strings; floats become Decimal, which is
        the only numeric type DynamoDB accepts.
        """
        return json.loads(row.model_dump_json(), parse_float=Decimal)

    def _item_to_row(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a DynamoDB item back to plain Python values."""
        return {key: _from_dynamo(value) for key, value in item.items()}


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    return value
