"""Study coach: assessments, dashboards and AI-generated study plans."""

__version__ = "0.1.0"
