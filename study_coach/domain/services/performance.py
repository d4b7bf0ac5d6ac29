"""Performance analysis over assessment and study session rows.

Rows are expected newest first, the order the row store returns them.
"""

from collections import Counter
from typing import Optional, Sequence

from ..entities.ai_replies import (
    OverallProgress,
    PerformanceAnalysis,
    StrengthsAndWeaknesses,
    StudyPatterns,
    SubjectPerformance,
)
from ..entities.study_session import StudySession
from .recommendations import (
    STRONG_THRESHOLD,
    WEAK_THRESHOLD,
    ScoredRow,
    average_score,
    normalized_score,
    scores_by_subject,
)

TREND_MARGIN = 0.05


def score_trend(scores_newest_first: Sequence[float]) -> str:
    """Compare the newer half of the scores with the older half."""
    if len(scores_newest_first) < 2:
        return "insufficient_data"

    half = len(scores_newest_first) // 2
    newer = scores_newest_first[:half]
    older = scores_newest_first[-half:]
    delta = sum(newer) / len(newer) - sum(older) / len(older)
    if delta > TREND_MARGIN:
        return "improving"
    if delta < -TREND_MARGIN:
        return "declining"
    return "steady"


def calculate_overall_progress(rows: Sequence[ScoredRow]) -> OverallProgress:
    avg = average_score(rows)
    return OverallProgress(
        overall=0 if avg is None else round(avg * 100),
        trend=score_trend([normalized_score(row) for row in rows]),
    )


def analyze_subject_performance(rows: Sequence[ScoredRow]) -> dict[str, SubjectPerformance]:
    return {
        subject: SubjectPerformance(
            average=sum(scores) / len(scores),
            attempts=len(scores),
            best=max(scores),
            latest=scores[0],
        )
        for subject, scores in scores_by_subject(rows).items()
    }


def identify_learning_trends(rows: Sequence[ScoredRow]) -> dict[str, str]:
    return {subject: score_trend(scores) for subject, scores in scores_by_subject(rows).items()}


def categorize_performance(rows: Sequence[ScoredRow]) -> StrengthsAndWeaknesses:
    """Split subjects into strengths (average >= 0.8) and weaknesses (< 0.6)."""
    result = StrengthsAndWeaknesses()
    for subject, scores in scores_by_subject(rows).items():
        avg = sum(scores) / len(scores)
        if avg >= STRONG_THRESHOLD:
            result.strengths.append(subject)
        elif avg < WEAK_THRESHOLD:
            result.weaknesses.append(subject)
    return result


def analyze_study_patterns(sessions: Sequence[StudySession]) -> StudyPatterns:
    if not sessions:
        return StudyPatterns()

    completed = [session for session in sessions if session.completed]
    total_minutes = sum(session.duration for session in completed)
    minutes_by_subject: Counter[str] = Counter()
    for session in completed:
        minutes_by_subject[session.subject] += session.duration

    return StudyPatterns(
        total_sessions=len(sessions),
        completed_sessions=len(completed),
        completion_rate=len(completed) / len(sessions),
        total_minutes=total_minutes,
        average_session_minutes=total_minutes / len(completed) if completed else 0,
        most_studied_subject=minutes_by_subject.most_common(1)[0][0] if minutes_by_subject else None,
    )


def predict_future_performance(rows: Sequence[ScoredRow]) -> dict[str, int]:
    """Project each subject's next score from its latest score and average step."""
    predictions = {}
    for subject, scores in scores_by_subject(rows).items():
        latest = scores[0]
        step = (scores[0] - scores[-1]) / (len(scores) - 1) if len(scores) > 1 else 0.0
        predictions[subject] = round(min(1.0, max(0.0, latest + step)) * 100)
    return predictions


def generate_performance_recommendations(
    rows: Sequence[ScoredRow], sessions: Sequence[StudySession]
) -> list[str]:
    if not rows:
        return ["Take a diagnostic assessment so progress can be measured"]

    recommendations = []
    categories = categorize_performance(rows)
    for subject in categories.weaknesses:
        recommendations.append(f"Schedule extra practice sessions for {subject}")
    for subject, trend in identify_learning_trends(rows).items():
        if trend == "declining":
            recommendations.append(f"Review recent {subject} topics; scores are slipping")

    patterns = analyze_study_patterns(sessions)
    if not sessions:
        recommendations.append("Plan regular study sessions to build a routine")
    elif patterns.completion_rate < 0.5:
        recommendations.append("Complete more of your scheduled study sessions")

    if not recommendations:
        recommendations.append("Keep up the consistent work and raise the difficulty gradually")
    return recommendations


def generate_adaptive_suggestions(rows: Sequence[ScoredRow]) -> list[str]:
    suggestions = []
    for subject, scores in scores_by_subject(rows).items():
        avg = sum(scores) / len(scores)
        if avg >= STRONG_THRESHOLD:
            suggestions.append(f"Move on to advanced {subject} problems")
        elif avg < WEAK_THRESHOLD:
            suggestions.append(f"Revisit {subject} fundamentals at beginner level")
        else:
            suggestions.append(f"Keep practising {subject} at intermediate level")
    return suggestions


def build_performance_analysis(
    rows: Sequence[ScoredRow], sessions: Optional[Sequence[StudySession]] = None
) -> PerformanceAnalysis:
    """Full rule-based analysis of a learner's history."""
    sessions = sessions or []
    return PerformanceAnalysis(
        overall_progress=calculate_overall_progress(rows),
        subject_wise_analysis=analyze_subject_performance(rows),
        learning_trends=identify_learning_trends(rows),
        strengths_and_weaknesses=categorize_performance(rows),
        study_patterns=analyze_study_patterns(sessions),
        recommendations=generate_performance_recommendations(rows, sessions),
        predicted_outcomes=predict_future_performance(rows),
        adaptive_suggestions=generate_adaptive_suggestions(rows),
    )
