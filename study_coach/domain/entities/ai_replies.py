"""Structured objects produced by the AI assistant.

Each model doubles as the JSON schema a completion reply is validated
against, and as the shape of the rule-based fallback built when a reply
cannot be parsed.
"""

from typing import Literal, Optional

from pydantic import Field

from .wire import CamelModel


# ===== Study plan =====


class SubjectPriority(CamelModel):
    name: str
    priority: Literal["high", "medium", "low"]
    allocated_hours: int = Field(ge=0)
    current_level: float = Field(ge=0, le=1)


class DailySchedule(CamelModel):
    sessions_per_day: int = Field(ge=1)
    session_length: int = Field(ge=0, description="Minutes per session")
    break_time: int = Field(default=15, ge=0)
    optimal_times: list[str] = Field(default_factory=list)
    adaptive_scheduling: bool = True


class SubjectMilestone(CamelModel):
    subject: str
    target_week: int = Field(ge=1)
    description: str
    assessment_required: bool = True


class StudyPlan(CamelModel):
    """Personalized study plan."""

    title: str = Field(min_length=1, max_length=300)
    duration: int = Field(ge=0, description="Estimated study hours")
    subjects: list[SubjectPriority] = Field(min_length=1)
    daily_schedule: DailySchedule
    weak_areas: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    milestones: list[SubjectMilestone] = Field(default_factory=list)


# ===== Question explanation =====


class QuestionExplanation(CamelModel):
    """Tutor-style explanation of a single question."""

    concept: str = Field(min_length=1)
    step_by_step: list[str] = Field(min_length=1)
    alternative_methods: list[str] = Field(default_factory=list)
    related_topics: list[str] = Field(default_factory=list)
    practice_questions: list[str] = Field(default_factory=list)
    tips: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)


# ===== Performance analysis =====


class OverallProgress(CamelModel):
    overall: int = Field(ge=0, le=100)
    trend: Literal["improving", "declining", "steady", "insufficient_data"]


class SubjectPerformance(CamelModel):
    average: float = Field(ge=0, le=1)
    attempts: int = Field(ge=0)
    best: float = Field(ge=0, le=1)
    latest: float = Field(ge=0, le=1)


class StrengthsAndWeaknesses(CamelModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class StudyPatterns(CamelModel):
    total_sessions: int = Field(default=0, ge=0)
    completed_sessions: int = Field(default=0, ge=0)
    completion_rate: float = Field(default=0, ge=0, le=1)
    total_minutes: int = Field(default=0, ge=0)
    average_session_minutes: float = Field(default=0, ge=0)
    most_studied_subject: Optional[str] = None


class PerformanceAnalysis(CamelModel):
    """Analysis of a learner's assessments and study sessions."""

    overall_progress: OverallProgress
    subject_wise_analysis: dict[str, SubjectPerformance] = Field(default_factory=dict)
    learning_trends: dict[str, str] = Field(default_factory=dict)
    strengths_and_weaknesses: StrengthsAndWeaknesses = Field(default_factory=StrengthsAndWeaknesses)
    study_patterns: StudyPatterns = Field(default_factory=StudyPatterns)
    recommendations: list[str] = Field(default_factory=list)
    predicted_outcomes: dict[str, int] = Field(default_factory=dict)
    adaptive_suggestions: list[str] = Field(default_factory=list)


# ===== Adaptive learning path (ai-assistant "learning-path") =====


class LearningPhase(CamelModel):
    name: str
    duration: int = Field(ge=0, description="Days")
    focus: str = ""
    level: str = ""


class AdaptiveModule(CamelModel):
    title: str
    level: str
    format: str = "lesson"


class AssessmentSchedule(CamelModel):
    frequency_days: int = Field(ge=1)
    checkpoints: list[int] = Field(default_factory=list)


class ProgressTracking(CamelModel):
    metrics: list[str] = Field(default_factory=list)
    review_interval_days: int = Field(default=7, ge=1)


class AdaptationTrigger(CamelModel):
    condition: str
    action: str


class AdaptiveLearningPath(CamelModel):
    """Goal-driven learning path with adaptation rules."""

    title: str = Field(min_length=1, max_length=300)
    phases: list[LearningPhase] = Field(min_length=1)
    adaptive_modules: list[AdaptiveModule] = Field(default_factory=list)
    assessment_schedule: AssessmentSchedule
    personalized_content: list[str] = Field(default_factory=list)
    progress_tracking: ProgressTracking = Field(default_factory=ProgressTracking)
    adaptation_triggers: list[AdaptationTrigger] = Field(default_factory=list)


# ===== Generated learning path (generate-learning-path endpoint) =====


class PathTopic(CamelModel):
    name: str
    estimated_hours: float = Field(ge=0)
    difficulty: str
    prerequisites: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)
    assessment_type: str = "quiz"


class PathPhase(CamelModel):
    name: str
    duration: int = Field(ge=0, description="Days")
    objectives: list[str] = Field(default_factory=list)
    topics: list[PathTopic] = Field(default_factory=list)


class PathMilestone(CamelModel):
    week: int = Field(ge=0)
    title: str
    description: str = ""
    assessment_required: bool = True


class StudySchedule(CamelModel):
    daily_structure: str = ""
    weekly_pattern: str = ""
    break_recommendations: str = ""


class AdaptiveElements(CamelModel):
    difficulty_progression: str = ""
    personalized_tips: list[str] = Field(default_factory=list)
    strength_focus: str = ""
    weakness_improvement: str = ""


class PathResources(CamelModel):
    books: list[str] = Field(default_factory=list)
    online_resources: list[str] = Field(default_factory=list)
    practice_tools: list[str] = Field(default_factory=list)
    video_lectures: list[str] = Field(default_factory=list)


class GeneratedLearningPath(CamelModel):
    """Detailed curriculum returned by ``generate-learning-path``."""

    title: str = Field(min_length=1, max_length=300)
    description: str = ""
    total_duration: int = Field(ge=1, description="Days")
    phases: list[PathPhase] = Field(min_length=1)
    milestones: list[PathMilestone] = Field(default_factory=list)
    study_schedule: StudySchedule = Field(default_factory=StudySchedule)
    adaptive_elements: AdaptiveElements = Field(default_factory=AdaptiveElements)
    resources: PathResources = Field(default_factory=PathResources)
