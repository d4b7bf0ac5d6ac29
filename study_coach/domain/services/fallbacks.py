"""Rule-based replacements for unusable completion replies.

Every builder here is deterministic: the same rows and request give the
same object, so a failed completion still yields a complete answer.
"""

import math
from datetime import datetime
from typing import Optional, Sequence

from ..entities.ai_replies import (
    AdaptationTrigger,
    AdaptiveElements,
    AdaptiveLearningPath,
    AdaptiveModule,
    AssessmentSchedule,
    GeneratedLearningPath,
    LearningPhase,
    PathMilestone,
    PathPhase,
    PathResources,
    PathTopic,
    ProgressTracking,
    QuestionExplanation,
    StudyPlan,
    StudySchedule,
)
from ..entities.ai_requests import AdaptivePathInput, ExplanationInput, LearningPathRequest, StudyPlanInput
from ..entities.assessment import DifficultyLevel
from ..entities.user_profile import UserProfile
from .recommendations import (
    ScoredRow,
    calculate_optimal_duration,
    create_milestones,
    extract_subjects_from_goal,
    generate_daily_schedule,
    generate_recommendations,
    identify_weak_areas,
    prioritize_subjects,
)

_LEVELS = [level.value for level in DifficultyLevel]

DEFAULT_EXPLANATION_STEPS = (
    "Understand the problem",
    "Apply the relevant formula or rule",
    "Calculate and check the result",
)


def build_study_plan(
    profile: Optional[UserProfile],
    assessments: Sequence[ScoredRow],
    data: StudyPlanInput,
    target_date: datetime,
    now: datetime,
) -> StudyPlan:
    name = profile.full_name if profile and profile.full_name else "Student"
    grade_level = profile.grade_level if profile else None
    learning_goals = profile.learning_goals if profile else None
    return StudyPlan(
        title=f"Personalized Study Plan for {name}",
        duration=calculate_optimal_duration(assessments),
        subjects=prioritize_subjects(assessments, data.subjects),
        daily_schedule=generate_daily_schedule(grade_level, data.study_hours),
        weak_areas=identify_weak_areas(assessments),
        recommendations=generate_recommendations(assessments, learning_goals),
        milestones=create_milestones(target_date, data.subjects, now),
    )


def build_explanation(data: ExplanationInput, raw_text: str) -> QuestionExplanation:
    """Keep a free-text reply usable by treating its lines as solution steps."""
    steps = [line.strip() for line in (raw_text or "").splitlines() if line.strip()]
    return QuestionExplanation(
        concept=f"Core concepts in {data.subject}",
        step_by_step=steps or list(DEFAULT_EXPLANATION_STEPS),
        alternative_methods=["Alternative approach available"],
        related_topics=[f"Related {data.subject} topics"],
        practice_questions=["Practice more similar questions"],
        tips=["Focus on understanding the fundamentals"],
        common_mistakes=["Double-check your calculations"],
    )


def _level_index(level: str) -> int:
    level = (level or "").lower()
    return _LEVELS.index(level) if level in _LEVELS else 0


def create_learning_phases(current_level: str, target_goal: str, duration_days: int) -> list[LearningPhase]:
    """Foundation, practice and mastery phases whose durations sum to the timeframe."""
    start = _level_index(current_level)
    foundation = duration_days * 2 // 5
    practice = duration_days * 2 // 5
    mastery = duration_days - foundation - practice
    phases = [
        LearningPhase(
            name="Foundation",
            duration=foundation,
            focus=f"Core concepts needed for {target_goal}",
            level=_LEVELS[start],
        ),
        LearningPhase(
            name="Practice",
            duration=practice,
            focus="Guided problem solving",
            level=_LEVELS[min(start + 1, len(_LEVELS) - 1)],
        ),
        LearningPhase(
            name="Mastery",
            duration=mastery,
            focus="Timed mock tests and revision",
            level=_LEVELS[-1],
        ),
    ]
    return [phase for phase in phases if phase.duration > 0]


def create_assessment_schedule(duration_days: int) -> AssessmentSchedule:
    frequency = 7 if duration_days >= 14 else max(1, duration_days // 2)
    checkpoints = list(range(frequency, duration_days + 1, frequency))
    if not checkpoints or checkpoints[-1] != duration_days:
        checkpoints.append(duration_days)
    return AssessmentSchedule(frequency_days=frequency, checkpoints=checkpoints)


def generate_adaptive_modules(current_level: str, target_goal: str, preferences: dict) -> list[AdaptiveModule]:
    subjects = extract_subjects_from_goal(target_goal) or [target_goal]
    module_format = str(preferences.get("format", "lesson"))
    level = _LEVELS[_level_index(current_level)]
    modules = []
    for subject in subjects:
        modules.append(AdaptiveModule(title=f"{subject} fundamentals", level=level, format=module_format))
        modules.append(AdaptiveModule(title=f"{subject} practice set", level=level, format="practice"))
    return modules


def recommend_personalized_content(profile: Optional[UserProfile], target_goal: str) -> list[str]:
    content = [f"Curated practice problems for {target_goal}"]
    if profile and profile.grade_level:
        content.append(f"Reading material pitched at {profile.grade_level} level")
    if profile:
        content.extend(f"Extra exercises supporting your goal: {goal}" for goal in profile.learning_goals)
    return content


def define_adaptation_triggers() -> list[AdaptationTrigger]:
    return [
        AdaptationTrigger(
            condition="Average checkpoint score below 60%",
            action="Repeat the current phase at the previous level",
        ),
        AdaptationTrigger(
            condition="Average checkpoint score above 80%",
            action="Advance to the next level early",
        ),
        AdaptationTrigger(
            condition="Fewer than half of the week's sessions completed",
            action="Shorten daily sessions and reschedule missed topics",
        ),
    ]


def build_adaptive_path(
    profile: Optional[UserProfile], data: AdaptivePathInput, duration_days: int
) -> AdaptiveLearningPath:
    return AdaptiveLearningPath(
        title=f"Learning Path: {data.target_goal}",
        phases=create_learning_phases(data.current_level, data.target_goal, duration_days),
        adaptive_modules=generate_adaptive_modules(data.current_level, data.target_goal, data.preferences),
        assessment_schedule=create_assessment_schedule(duration_days),
        personalized_content=recommend_personalized_content(profile, data.target_goal),
        progress_tracking=ProgressTracking(
            metrics=["checkpoint scores", "study minutes", "phases completed"],
            review_interval_days=7,
        ),
        adaptation_triggers=define_adaptation_triggers(),
    )


def build_generated_path(request: LearningPathRequest) -> GeneratedLearningPath:
    """Curriculum with one phase per subject, covering the requested timeframe."""
    goal = request.target_goal or ", ".join(request.subjects)
    phase_days = math.ceil(request.timeframe / len(request.subjects))
    return GeneratedLearningPath(
        title=f"{goal} Learning Path",
        description=f"Personalized learning path for {goal}",
        total_duration=request.timeframe,
        phases=[
            PathPhase(
                name=f"Master {subject}",
                duration=phase_days,
                objectives=[f"Understand core concepts in {subject}", "Apply knowledge practically"],
                topics=[
                    PathTopic(
                        name=f"Foundation in {subject}",
                        estimated_hours=request.study_hours_per_day * 7,
                        difficulty=request.difficulty_level.value,
                        resources=[f"{subject} textbook", f"Online {subject} course"],
                        assessment_type="quiz",
                    )
                ],
            )
            for subject in request.subjects
        ],
        milestones=[
            PathMilestone(
                week=math.ceil(request.timeframe / 7 / 2),
                title="Mid-term Assessment",
                description="Evaluate progress and adjust study plan",
                assessment_required=True,
            )
        ],
        study_schedule=StudySchedule(
            daily_structure=f"{request.study_hours_per_day:g} hours split into focused sessions",
            weekly_pattern="6 days study, 1 day review and rest",
            break_recommendations="15-minute breaks every hour",
        ),
        adaptive_elements=AdaptiveElements(
            difficulty_progression="Gradual increase from current level",
            personalized_tips=[f"Focus on {request.learning_style} learning methods"],
            strength_focus="Build on existing knowledge",
            weakness_improvement="Targeted practice in weak areas",
        ),
        resources=PathResources(
            books=[f"Standard {subject} textbook" for subject in request.subjects],
            online_resources=["Khan Academy", "Coursera", "edX"],
            practice_tools=["Practice problem sets", "Mock tests"],
            video_lectures=["YouTube educational channels", "MIT OpenCourseWare"],
        ),
    )
