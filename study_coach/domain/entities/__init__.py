"""Domain entities for the study coach application."""

from .ai_requests import (
    AdaptivePathInput,
    AIRequest,
    AIRequestKind,
    AssessmentSummary,
    ExplanationInput,
    LearningPathRequest,
    PerformanceAnalysisInput,
    StudyPlanInput,
)
from .ai_replies import (
    AdaptiveLearningPath,
    GeneratedLearningPath,
    PerformanceAnalysis,
    QuestionExplanation,
    StudyPlan,
)
from .assessment import (
    Assessment,
    AssessmentResult,
    DifficultyLevel,
    LearningStyle,
    PublicQuestion,
    Question,
)
from .dashboard import DashboardSnapshot, DashboardStats, RequestState
from .learning_path import LearningPath
from .quiz_session import QuizSession, QuizStatus, QuizStep, QuizStepStatus
from .smart_goal import GoalStatus, SmartGoal
from .study_session import StudySession
from .user_profile import UserProfile

__all__ = [
    # Row entities
    "UserProfile",
    "Assessment",
    "LearningPath",
    "SmartGoal",
    "GoalStatus",
    "StudySession",
    # Assessment entities
    "Question",
    "PublicQuestion",
    "AssessmentResult",
    "DifficultyLevel",
    "LearningStyle",
    "QuizSession",
    "QuizStatus",
    "QuizStep",
    "QuizStepStatus",
    # AI request entities
    "AIRequest",
    "AIRequestKind",
    "StudyPlanInput",
    "ExplanationInput",
    "PerformanceAnalysisInput",
    "AdaptivePathInput",
    "AssessmentSummary",
    "LearningPathRequest",
    # AI reply entities
    "StudyPlan",
    "QuestionExplanation",
    "PerformanceAnalysis",
    "AdaptiveLearningPath",
    "GeneratedLearningPath",
    # Dashboard entities
    "DashboardSnapshot",
    "DashboardStats",
    "RequestState",
]
