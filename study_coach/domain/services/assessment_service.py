"""Assessment service running one quiz from first question to stored result."""

import inspect
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..entities.assessment import Assessment, AssessmentResult
from ..entities.quiz_session import QuizSession, QuizStatus, QuizStep, QuizStepStatus
from ..entities.user_profile import utc_now
from ..errors import AnswerRequiredError, InvalidRequestError
from ..interfaces.row_store import RowStore
from .question_bank import get_question, select_questions
from .recommendations import assessment_recommendations, difficulty_for_percentage, learning_style_for

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save assessment results"
FIRST_QUESTION_MESSAGE = "Already on first question"

CompletionCallback = Callable[[AssessmentResult], Any]


def start_quiz(user_id: str, subject: str, clock: Callable[[], datetime] = utc_now) -> QuizSession:
    """Create a quiz over the questions selected for ``subject``.

    Raises:
        InvalidRequestError: If the subject has no questions.
    """
    questions = select_questions(subject)
    now = clock()
    return QuizSession(
        user_id=user_id,
        subject=subject,
        question_ids=[question.id for question in questions],
        started_at=now,
        last_activity_at=now,
    )


class AssessmentService:
    """
    Drives a single quiz session.

    The service mutates the ``QuizSession`` it is given; callers that keep
    quizzes in a repository save the session after each interaction.
    """

    def __init__(
        self,
        quiz: QuizSession,
        row_store: RowStore,
        clock: Callable[[], datetime] = utc_now,
        on_complete: Optional[CompletionCallback] = None,
    ):
        self.quiz = quiz
        self.row_store = row_store
        self._clock = clock
        self._on_complete = on_complete

    def current_step(self) -> QuizStep:
        """Describe where the quiz stands without changing it."""
        if self.quiz.status is QuizStatus.COMPLETED:
            return self._result_step(QuizStepStatus.COMPLETED)
        if self.quiz.status is QuizStatus.SAVE_FAILED:
            return self._result_step(QuizStepStatus.SAVE_FAILED, SAVE_FAILED_MESSAGE)
        return self._question_step()

    def select_answer(self, option_index: int) -> QuizStep:
        """Record the selected option for the current question.

        Raises:
            InvalidRequestError: If the quiz is finished or the option does not exist.
        """
        self._ensure_in_progress()
        question = get_question(self.quiz.question_ids[self.quiz.current_index])
        if not 0 <= option_index < len(question.options):
            raise InvalidRequestError(
                f"Option {option_index} out of range for question {question.id}"
            )

        self.quiz.answers[self.quiz.current_index] = option_index
        self._touch()
        return self._question_step()

    async def next(self) -> QuizStep:
        """Advance to the next question, completing the quiz after the last one.

        A quiz whose result could not be saved retries the save.

        Raises:
            AnswerRequiredError: If no option is selected for the current question.
        """
        if self.quiz.status is QuizStatus.COMPLETED:
            return self._result_step(QuizStepStatus.COMPLETED)
        if self.quiz.status is QuizStatus.SAVE_FAILED:
            return await self._save_result()

        if self.quiz.answers[self.quiz.current_index] is None:
            raise AnswerRequiredError()

        self._touch()
        if not self.quiz.is_last_question:
            self.quiz.current_index += 1
            return self._question_step()

        self.quiz.result = self._score()
        self.quiz.completed_at = self.quiz.last_activity_at
        return await self._save_result()

    def previous(self) -> QuizStep:
        """Go back one question, keeping every selection made so far."""
        self._ensure_in_progress()
        if self.quiz.current_index == 0:
            return self._question_step(FIRST_QUESTION_MESSAGE)

        self.quiz.current_index -= 1
        self._touch()
        return self._question_step()

    def _score(self) -> AssessmentResult:
        questions = [get_question(question_id) for question_id in self.quiz.question_ids]
        score = sum(
            1 for question, answer in zip(questions, self.quiz.answers) if answer == question.correct_answer
        )
        total = len(questions)
        percentage = score / total * 100
        elapsed = max(0.0, (self.quiz.last_activity_at - self.quiz.started_at).total_seconds())

        return AssessmentResult(
            subject=self.quiz.subject,
            score=score,
            total_questions=total,
            percentage=percentage,
            difficulty_level=difficulty_for_percentage(percentage),
            learning_style=learning_style_for(elapsed / total, percentage),
            recommendations=assessment_recommendations(percentage, self.quiz.subject),
            elapsed_seconds=elapsed,
        )

    async def _save_result(self) -> QuizStep:
        result = self.quiz.result
        try:
            row = await self.row_store.insert_assessment(
                Assessment(
                    user_id=self.quiz.user_id,
                    subject=result.subject,
                    score=result.score,
                    total_questions=result.total_questions,
                    difficulty_level=result.difficulty_level.value,
                    learning_style=result.learning_style.value,
                    completed_at=self.quiz.completed_at,
                )
            )
        except Exception as e:
            logger.error(f"Failed to save assessment for quiz {self.quiz.id}: {e}")
            self.quiz.status = QuizStatus.SAVE_FAILED
            return self._result_step(QuizStepStatus.SAVE_FAILED, SAVE_FAILED_MESSAGE)

        self.quiz.status = QuizStatus.COMPLETED
        self.quiz.assessment_id = row.id
        logger.info(
            f"Quiz {self.quiz.id} completed: {result.score}/{result.total_questions} in {result.subject}"
        )

        if self._on_complete is not None:
            outcome = self._on_complete(result)
            if inspect.isawaitable(outcome):
                await outcome
        return self._result_step(QuizStepStatus.COMPLETED)

    def _ensure_in_progress(self) -> None:
        if self.quiz.status is not QuizStatus.IN_PROGRESS:
            raise InvalidRequestError(f"Quiz {self.quiz.id} is already finished")

    def _touch(self) -> None:
        self.quiz.last_activity_at = self._clock()

    def _question_step(self, message: Optional[str] = None) -> QuizStep:
        index = self.quiz.current_index
        return QuizStep(
            quiz_id=str(self.quiz.id),
            status=QuizStepStatus.QUESTION,
            position=index + 1,
            total=self.quiz.total_questions,
            question=get_question(self.quiz.question_ids[index]).public_view(),
            selected_option=self.quiz.answers[index],
            message=message,
        )

    def _result_step(self, status: QuizStepStatus, message: Optional[str] = None) -> QuizStep:
        return QuizStep(
            quiz_id=str(self.quiz.id),
            status=status,
            position=self.quiz.total_questions,
            total=self.quiz.total_questions,
            message=message,
            result=self.quiz.result,
        )
