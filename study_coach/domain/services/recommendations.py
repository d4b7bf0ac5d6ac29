"""Rule-based scoring and recommendation functions.

These are pure functions over already-loaded rows. Each one is total:
an empty assessment history gives a neutral answer instead of raising.

Two independent families of thresholds live here: the quiz-side labels
(``difficulty_for_percentage`` and the other quiz helpers) and the
path-side heuristics (``determine_difficulty_level``, ``prioritize_subjects``
and the rest).
"""

import math
import re
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Optional, Protocol, Sequence, Union

from ..entities.ai_replies import DailySchedule, SubjectMilestone, SubjectPriority
from ..entities.assessment import DifficultyLevel, LearningStyle

BASE_STUDY_HOURS = 100
MAX_DAILY_SESSIONS = 4
SESSION_BLOCK_HOURS = 1.5
BREAK_MINUTES = 15
OPTIMAL_TIMES = ("09:00-10:30", "11:00-12:30", "14:00-15:30", "16:00-17:30")
DEFAULT_PATH_DAYS = 30
WEAK_THRESHOLD = 0.6
STRONG_THRESHOLD = 0.8

KNOWN_SUBJECTS = (
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "Computer Science",
    "English",
    "History",
    "Geography",
    "Economics",
)
_SUBJECT_ALIASES = {
    "math": "Mathematics",
    "maths": "Mathematics",
    "calculus": "Mathematics",
    "algebra": "Mathematics",
    "programming": "Computer Science",
    "coding": "Computer Science",
}


class ScoredRow(Protocol):
    """Anything carrying a subject and a score out of a question count."""

    subject: str
    score: int
    total_questions: int


# ===== Quiz-side labels =====


def difficulty_for_percentage(percentage: float) -> DifficultyLevel:
    """Map a quiz percentage to a difficulty label (upper edges inclusive)."""
    if percentage >= 80:
        return DifficultyLevel.ADVANCED
    if percentage >= 60:
        return DifficultyLevel.INTERMEDIATE
    return DifficultyLevel.BEGINNER


def learning_style_for(average_seconds: float, percentage: float) -> LearningStyle:
    """Label the learner's pace: fast and accurate, slow, or in between."""
    if average_seconds < 30 and percentage > 70:
        return LearningStyle.QUICK_LEARNER
    if average_seconds > 60:
        return LearningStyle.THOROUGH
    return LearningStyle.BALANCED


def assessment_recommendations(percentage: float, subject: str) -> list[str]:
    """Three next-step suggestions for a finished quiz."""
    if percentage < 50:
        return [
            f"Focus on {subject} fundamentals",
            "Practice basic concepts daily",
            "Consider additional study resources",
        ]
    if percentage < 80:
        return [
            f"Build on your {subject} foundation",
            "Practice intermediate level problems",
            "Review concepts you found challenging",
        ]
    return [
        f"Excellent work in {subject}!",
        "Challenge yourself with advanced topics",
        "Consider helping others or teaching concepts",
    ]


# ===== Score aggregation =====


def normalized_score(row: ScoredRow) -> float:
    """Score as a fraction of the question count."""
    return row.score / row.total_questions


def average_score(rows: Sequence[ScoredRow]) -> Optional[float]:
    """Mean normalized score, or None for an empty history."""
    if not rows:
        return None
    return sum(normalized_score(row) for row in rows) / len(rows)


def scores_by_subject(rows: Iterable[ScoredRow]) -> dict[str, list[float]]:
    """Normalized scores grouped by subject, in first-seen subject order."""
    grouped: dict[str, list[float]] = defaultdict(list)
    for row in rows:
        grouped[row.subject].append(normalized_score(row))
    return dict(grouped)


# ===== Path-side heuristics =====


def prioritize_subjects(rows: Sequence[ScoredRow], requested_subjects: Sequence[str]) -> list[SubjectPriority]:
    """Rank requested subjects by how much study they need.

    Subjects without any assessment are treated as a middling 0.5. When no
    subjects are requested, the assessed subjects are used.
    """
    grouped = scores_by_subject(rows)
    subjects = list(requested_subjects) or list(grouped)

    priorities = []
    for subject in subjects:
        scores = grouped.get(subject) or [0.5]
        avg = sum(scores) / len(scores)
        if avg < WEAK_THRESHOLD:
            priority, hours = "high", 40
        elif avg < STRONG_THRESHOLD:
            priority, hours = "medium", 25
        else:
            priority, hours = "low", 15
        priorities.append(
            SubjectPriority(name=subject, priority=priority, allocated_hours=hours, current_level=avg)
        )
    return priorities


def identify_weak_areas(rows: Sequence[ScoredRow]) -> list[str]:
    """Subjects whose lowest observed score is below 0.6."""
    return [
        subject
        for subject, scores in scores_by_subject(rows).items()
        if min(scores) < WEAK_THRESHOLD
    ]


def duration_adjustment(avg: float) -> float:
    """Scale factor for the base study hours. 0.7 and 0.85 themselves map to 1."""
    if avg < 0.7:
        return 1.5
    if avg > 0.85:
        return 0.8
    return 1.0


def calculate_optimal_duration(rows: Sequence[ScoredRow]) -> int:
    """Estimated study hours for a plan, based on the global average score."""
    avg = average_score(rows)
    if avg is None:
        return BASE_STUDY_HOURS
    return round(BASE_STUDY_HOURS * duration_adjustment(avg))


def generate_daily_schedule(grade_level: Optional[str], study_hours: float) -> DailySchedule:
    """Split the daily study hours into at most four sessions."""
    sessions = max(1, min(math.floor(study_hours / SESSION_BLOCK_HOURS), MAX_DAILY_SESSIONS))
    return DailySchedule(
        sessions_per_day=sessions,
        session_length=math.floor(study_hours * 60 / sessions),
        break_time=BREAK_MINUTES,
        optimal_times=list(OPTIMAL_TIMES[:sessions]),
        adaptive_scheduling=True,
    )


def generate_recommendations(rows: Sequence[object], learning_goals: Optional[Sequence[str]]) -> list[str]:
    """General study advice, extended by learning style and goals."""
    recommendations = [
        "Focus on weak areas identified in recent assessments",
        "Practice daily for consistent improvement",
        "Use spaced repetition for better retention",
    ]

    if any(getattr(row, "learning_style", None) == "visual" for row in rows):
        recommendations.append("Use visual aids and diagrams for better understanding")

    if learning_goals and "jee-prep" in learning_goals:
        recommendations.append("Focus on problem-solving techniques and time management")

    return recommendations


def weeks_until(target: datetime, now: datetime) -> int:
    """Whole weeks from now until the target, rounded up and at least 1."""
    return max(1, math.ceil((target - now) / timedelta(weeks=1)))


def create_milestones(target_date: datetime, subjects: Sequence[str], now: datetime) -> list[SubjectMilestone]:
    """Spread one mastery milestone per subject evenly up to the target date."""
    if not subjects:
        return []
    total_weeks = weeks_until(target_date, now)
    return [
        SubjectMilestone(
            subject=subject,
            target_week=max(1, math.ceil((index + 1) * total_weeks / len(subjects))),
            description=f"Master core concepts of {subject}",
            assessment_required=True,
        )
        for index, subject in enumerate(subjects)
    ]


def determine_difficulty_level(rows: Sequence[ScoredRow]) -> str:
    """Difficulty for a new learning path; beginner when there is no history."""
    avg = average_score(rows)
    if avg is None or avg < 0.5:
        return DifficultyLevel.BEGINNER.value
    if avg < 0.75:
        return DifficultyLevel.INTERMEDIATE.value
    return DifficultyLevel.ADVANCED.value


def extract_subjects_from_goal(target_goal: str) -> list[str]:
    """Known subject names mentioned in a free-text goal, in text order."""
    text = target_goal.lower()
    found: list[tuple[int, str]] = []
    for subject in KNOWN_SUBJECTS:
        position = text.find(subject.lower())
        if position >= 0:
            found.append((position, subject))
    for alias, subject in _SUBJECT_ALIASES.items():
        match = re.search(rf"\b{re.escape(alias)}\b", text)
        if match:
            found.append((match.start(), subject))

    found.sort()
    return list(dict.fromkeys(subject for _, subject in found))


_TIMEFRAME_UNITS = {"day": 1, "week": 7, "month": 30, "year": 365}


def calculate_path_duration(timeframe: Union[int, str, None]) -> int:
    """Days covered by a timeframe such as ``45``, ``"6 weeks"`` or ``"3 months"``."""
    if isinstance(timeframe, int) and timeframe > 0:
        return timeframe
    if isinstance(timeframe, str):
        match = re.match(r"\s*(\d+)\s*([a-z]*)", timeframe.lower())
        if match:
            amount = int(match.group(1))
            unit = match.group(2).rstrip("s")
            days = amount * _TIMEFRAME_UNITS.get(unit, 1)
            if days > 0:
                return days
    return DEFAULT_PATH_DAYS
