"""Tests for the question bank."""

import pytest

from study_coach.domain.errors import InvalidRequestError
from study_coach.domain.services.question_bank import (
    MAX_QUESTIONS,
    QUESTION_BANK,
    get_question,
    select_questions,
    subjects,
)


def test_general_uses_first_five_questions():
    selected = select_questions("General")

    assert [question.id for question in selected] == ["1", "2", "3", "4", "5"]


def test_subject_selects_exact_matches():
    selected = select_questions("Mathematics")

    assert len(selected) == MAX_QUESTIONS
    assert all(question.subject == "Mathematics" for question in selected)
    assert [question.id for question in selected] == ["1", "4", "6", "7", "8"]


def test_subject_match_is_exact():
    with pytest.raises(InvalidRequestError, match="No questions available"):
        select_questions("mathematics")


def test_unknown_subject_rejected():
    with pytest.raises(InvalidRequestError):
        select_questions("Astrology")


def test_every_subject_has_a_full_quiz():
    for subject in subjects():
        assert len(select_questions(subject)) == MAX_QUESTIONS


def test_subjects_in_bank_order():
    assert subjects() == ["Mathematics", "Physics", "Chemistry"]


def test_question_ids_unique():
    ids = [question.id for question in QUESTION_BANK]

    assert len(ids) == len(set(ids))


def test_get_question():
    assert get_question("3").question == "What is the chemical formula for water?"


def test_get_unknown_question():
    with pytest.raises(ValueError, match="Question with id 99 not found"):
        get_question("99")
