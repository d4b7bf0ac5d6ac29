"""Tests for LocalRowStore."""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from study_coach.domain.entities import (
    Assessment,
    GoalStatus,
    LearningPath,
    SmartGoal,
    StudySession,
    UserProfile,
)
from study_coach.infrastructure.local_row_store import LocalRowStore

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    """Create a fresh LocalRowStore for each test."""
    return LocalRowStore()


@pytest.fixture
def profile():
    return UserProfile(id="user-1", email="asha@example.com", full_name="Asha Verma", grade_level="12")


@pytest.mark.asyncio
async def test_find_missing_user_returns_none(store):
    assert await store.find_user("nobody") is None


@pytest.mark.asyncio
async def test_save_user_keeps_created_at(store, profile):
    first = await store.save_user(profile)
    renamed = await store.save_user(
        UserProfile(id="user-1", email="asha@example.com", full_name="Asha V", created_at=BASE_TIME)
    )

    assert renamed.created_at == first.created_at
    assert (await store.find_user("user-1")).full_name == "Asha V"


@pytest.mark.asyncio
async def test_list_assessments_newest_first_with_limit(store):
    for offset in range(5):
        await store.insert_assessment(
            Assessment(
                user_id="user-1",
                subject=f"S{offset}",
                score=1,
                total_questions=5,
                completed_at=BASE_TIME + timedelta(hours=offset),
            )
        )
    await store.insert_assessment(Assessment(user_id="user-2", subject="Other", score=1, total_questions=5))

    rows = await store.list_assessments("user-1", limit=3)

    assert [row.subject for row in rows] == ["S4", "S3", "S2"]
    assert len(await store.list_assessments("user-1")) == 5


@pytest.mark.asyncio
async def test_update_learning_path_progress(store):
    path = await store.insert_learning_path(LearningPath(user_id="user-1", title="Plan"))

    updated = await store.update_learning_path_progress(path.id, 35)

    assert updated.progress == 35
    assert (await store.list_learning_paths("user-1"))[0].progress == 35


@pytest.mark.asyncio
async def test_update_missing_learning_path(store):
    with pytest.raises(ValueError, match="Learning path with id .* not found"):
        await store.update_learning_path_progress(uuid.uuid4(), 10)


@pytest.mark.asyncio
async def test_goal_progress_to_completion(store):
    goal = await store.insert_goal(SmartGoal(user_id="user-1", title="Finish optics", target_date=date(2026, 6, 1)))

    updated = await store.update_goal_progress(goal.id, 100)

    assert updated.status == GoalStatus.COMPLETED
    assert (await store.list_goals("user-1", limit=5))[0].status == GoalStatus.COMPLETED


@pytest.mark.asyncio
async def test_update_missing_goal(store):
    with pytest.raises(ValueError, match="Goal with id .* not found"):
        await store.update_goal_progress(uuid.uuid4(), 10)


@pytest.mark.asyncio
async def test_complete_study_session(store):
    session = await store.insert_study_session(
        StudySession(user_id="user-1", subject="Physics", duration=60, scheduled_at=BASE_TIME)
    )

    completed = await store.complete_study_session(session.id, "Covered kinematics")

    assert completed.completed is True
    assert completed.notes == "Covered kinematics"


@pytest.mark.asyncio
async def test_complete_missing_study_session(store):
    with pytest.raises(ValueError, match="Study session with id .* not found"):
        await store.complete_study_session(uuid.uuid4())


@pytest.mark.asyncio
async def test_clear(store, profile):
    await store.save_user(profile)
    await store.insert_learning_path(LearningPath(user_id="user-1", title="Plan"))

    store.clear()

    assert await store.find_user("user-1") is None
    assert await store.list_learning_paths("user-1") == []
