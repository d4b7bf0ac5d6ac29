"""Tests for the quiz flow in AssessmentService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from study_coach.domain.entities import QuizStatus, QuizStepStatus
from study_coach.domain.entities.assessment import DifficultyLevel, LearningStyle
from study_coach.domain.errors import AnswerRequiredError, InvalidRequestError
from study_coach.domain.services.assessment_service import AssessmentService, start_quiz
from study_coach.infrastructure.local_row_store import LocalRowStore

MATH_ANSWERS = [0, 1, 1, 2, 1]


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self):
        self.now = datetime(2026, 3, 1, 10, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def row_store():
    return LocalRowStore()


@pytest.fixture
def service(row_store, clock):
    return AssessmentService(start_quiz("user-1", "Mathematics", clock), row_store, clock=clock)


async def answer_all(service: AssessmentService, answers, clock: FakeClock, seconds_per_question: float = 10):
    step = None
    for option in answers:
        clock.advance(seconds_per_question)
        service.select_answer(option)
        step = await service.next()
    return step


def test_start_quiz_positions_on_first_question(service):
    step = service.current_step()

    assert step.status is QuizStepStatus.QUESTION
    assert step.position == 1
    assert step.total == 5
    assert step.question.id == "1"
    assert step.selected_option is None


def test_start_quiz_rejects_unknown_subject(clock):
    with pytest.raises(InvalidRequestError):
        start_quiz("user-1", "Astrology", clock)


@pytest.mark.asyncio
async def test_perfect_quick_quiz(service, row_store, clock):
    step = await answer_all(service, MATH_ANSWERS, clock)

    assert step.status is QuizStepStatus.COMPLETED
    assert step.result.score == 5
    assert step.result.percentage == 100
    assert step.result.difficulty_level is DifficultyLevel.ADVANCED
    assert step.result.learning_style is LearningStyle.QUICK_LEARNER
    assert step.result.elapsed_seconds == 50
    assert step.result.recommendations[0] == "Excellent work in Mathematics!"

    (row,) = await row_store.list_assessments("user-1")
    assert row.score == 5
    assert row.total_questions == 5
    assert row.difficulty_level == "advanced"
    assert row.learning_style == "quick_learner"
    assert service.quiz.assessment_id == row.id


@pytest.mark.asyncio
async def test_slow_quiz_is_thorough(service, clock):
    step = await answer_all(service, [0, 0, 0, 0, 0], clock, seconds_per_question=61)

    assert step.result.score == 1
    assert step.result.difficulty_level is DifficultyLevel.BEGINNER
    assert step.result.learning_style is LearningStyle.THOROUGH
    assert step.result.recommendations[0] == "Focus on Mathematics fundamentals"


@pytest.mark.asyncio
async def test_next_requires_an_answer(service):
    with pytest.raises(AnswerRequiredError, match="Please select an answer"):
        await service.next()

    assert service.quiz.current_index == 0


def test_option_out_of_range(service):
    with pytest.raises(InvalidRequestError, match="out of range"):
        service.select_answer(4)


@pytest.mark.asyncio
async def test_previous_keeps_selections(service):
    service.select_answer(0)
    await service.next()
    service.select_answer(3)

    step = service.previous()

    assert step.position == 1
    assert step.selected_option == 0
    assert service.quiz.answers[1] == 3


def test_previous_on_first_question(service):
    step = service.previous()

    assert step.position == 1
    assert step.message == "Already on first question"


@pytest.mark.asyncio
async def test_failed_save_can_be_retried(clock):
    row_store = MagicMock()
    row_store.insert_assessment = AsyncMock(side_effect=RuntimeError("connection reset"))
    on_complete = MagicMock(return_value=None)
    service = AssessmentService(start_quiz("user-1", "Mathematics", clock), row_store, clock=clock, on_complete=on_complete)

    step = await answer_all(service, MATH_ANSWERS, clock)

    assert step.status is QuizStepStatus.SAVE_FAILED
    assert step.message == "Failed to save assessment results"
    assert step.result.score == 5
    assert service.quiz.status is QuizStatus.SAVE_FAILED
    on_complete.assert_not_called()

    row_store.insert_assessment.side_effect = None
    row_store.insert_assessment.return_value = MagicMock(id="saved-id")

    step = await service.next()

    assert step.status is QuizStepStatus.COMPLETED
    assert row_store.insert_assessment.await_count == 2
    on_complete.assert_called_once_with(service.quiz.result)


@pytest.mark.asyncio
async def test_async_completion_callback(row_store, clock):
    on_complete = AsyncMock()
    service = AssessmentService(start_quiz("user-1", "Mathematics", clock), row_store, clock=clock, on_complete=on_complete)

    await answer_all(service, MATH_ANSWERS, clock)

    on_complete.assert_awaited_once()


@pytest.mark.asyncio
async def test_finished_quiz_rejects_changes(service, clock):
    await answer_all(service, MATH_ANSWERS, clock)

    with pytest.raises(InvalidRequestError, match="already finished"):
        service.select_answer(0)
    with pytest.raises(InvalidRequestError):
        service.previous()

    step = await service.next()
    assert step.status is QuizStepStatus.COMPLETED
