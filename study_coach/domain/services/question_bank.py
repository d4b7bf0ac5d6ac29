"""Fixed multiple-choice question bank."""

from ..entities.assessment import DifficultyLevel, Question
from ..errors import InvalidRequestError

GENERAL_SUBJECT = "General"
MAX_QUESTIONS = 5

_B = DifficultyLevel.BEGINNER
_I = DifficultyLevel.INTERMEDIATE
_A = DifficultyLevel.ADVANCED

# The first five entries form the general assessment.
QUESTION_BANK: tuple[Question, ...] = (
    Question(
        id="1",
        question="What is the derivative of x²?",
        options=("2x", "x", "2", "x²"),
        correct_answer=0,
        subject="Mathematics",
        difficulty=_B,
        topic="Calculus",
    ),
    Question(
        id="2",
        question="Which of the following is NOT a fundamental force in physics?",
        options=("Gravitational", "Electromagnetic", "Nuclear", "Centrifugal"),
        correct_answer=3,
        subject="Physics",
        difficulty=_I,
        topic="Forces",
    ),
    Question(
        id="3",
        question="What is the chemical formula for water?",
        options=("H2O", "CO2", "NaCl", "CH4"),
        correct_answer=0,
        subject="Chemistry",
        difficulty=_B,
        topic="Basic Chemistry",
    ),
    Question(
        id="4",
        question="If f(x) = 2x + 3, what is f(5)?",
        options=("10", "13", "8", "15"),
        correct_answer=1,
        subject="Mathematics",
        difficulty=_B,
        topic="Functions",
    ),
    Question(
        id="5",
        question="What is the SI unit of electric current?",
        options=("Volt", "Ampere", "Ohm", "Watt"),
        correct_answer=1,
        subject="Physics",
        difficulty=_B,
        topic="Electricity",
    ),
    Question(
        id="6",
        question="What is the value of sin(90°)?",
        options=("0", "1", "-1", "1/2"),
        correct_answer=1,
        subject="Mathematics",
        difficulty=_B,
        topic="Trigonometry",
    ),
    Question(
        id="7",
        question="What is the sum of the roots of x² - 5x + 6 = 0?",
        options=("6", "-5", "5", "-6"),
        correct_answer=2,
        subject="Mathematics",
        difficulty=_I,
        topic="Quadratic Equations",
    ),
    Question(
        id="8",
        question="What is the integral of 1/x dx?",
        options=("x²/2 + C", "ln|x| + C", "-1/x² + C", "e^x + C"),
        correct_answer=1,
        subject="Mathematics",
        difficulty=_A,
        topic="Calculus",
    ),
    Question(
        id="9",
        question="A body moving in a circle at constant speed has which of these?",
        options=("Zero acceleration", "Tangential acceleration", "Centripetal acceleration", "Constant velocity"),
        correct_answer=2,
        subject="Physics",
        difficulty=_I,
        topic="Circular Motion",
    ),
    Question(
        id="10",
        question="What is the unit of power?",
        options=("Joule", "Newton", "Pascal", "Watt"),
        correct_answer=3,
        subject="Physics",
        difficulty=_B,
        topic="Work and Energy",
    ),
    Question(
        id="11",
        question="Light travels fastest in which medium?",
        options=("Vacuum", "Water", "Glass", "Diamond"),
        correct_answer=0,
        subject="Physics",
        difficulty=_B,
        topic="Optics",
    ),
    Question(
        id="12",
        question="What is the atomic number of carbon?",
        options=("12", "6", "14", "8"),
        correct_answer=1,
        subject="Chemistry",
        difficulty=_B,
        topic="Atomic Structure",
    ),
    Question(
        id="13",
        question="What is the pH of a neutral solution at 25°C?",
        options=("0", "14", "7", "1"),
        correct_answer=2,
        subject="Chemistry",
        difficulty=_B,
        topic="Acids and Bases",
    ),
    Question(
        id="14",
        question="Which type of bond holds the atoms of a chlorine molecule (Cl2) together?",
        options=("Ionic", "Nonpolar covalent", "Metallic", "Hydrogen"),
        correct_answer=1,
        subject="Chemistry",
        difficulty=_I,
        topic="Chemical Bonding",
    ),
    Question(
        id="15",
        question="What is the hybridization of carbon in methane (CH4)?",
        options=("sp", "sp2", "sp3", "sp3d"),
        correct_answer=2,
        subject="Chemistry",
        difficulty=_A,
        topic="Chemical Bonding",
    ),
)

_BY_ID = {question.id: question for question in QUESTION_BANK}


def subjects() -> list[str]:
    """Subjects present in the bank, in bank order."""
    return list(dict.fromkeys(question.subject for question in QUESTION_BANK))


def select_questions(subject: str, limit: int = MAX_QUESTIONS) -> list[Question]:
    """Pick the questions for a quiz.

    ``"General"`` selects from the whole bank; any other value selects exact
    subject matches. At most ``limit`` questions are returned, in bank order.

    Raises:
        InvalidRequestError: If the subject has no questions.
    """
    if subject == GENERAL_SUBJECT:
        selected = list(QUESTION_BANK)
    else:
        selected = [question for question in QUESTION_BANK if question.subject == subject]

    if not selected:
        raise InvalidRequestError(f"No questions available for subject {subject}")
    return selected[:limit]


def get_question(question_id: str) -> Question:
    """Look up a question by id.

    Raises:
        ValueError: If the question is not in the bank.
    """
    if question_id not in _BY_ID:
        raise ValueError(f"Question with id {question_id} not found")
    return _BY_ID[question_id]
