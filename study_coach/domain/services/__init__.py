"""Domain services for the study coach application."""

from .ai_assistant import AIAssistantService
from .assessment_service import AssessmentService, start_quiz
from .dashboard_service import DashboardService

__all__ = ["AIAssistantService", "AssessmentService", "DashboardService", "start_quiz"]
