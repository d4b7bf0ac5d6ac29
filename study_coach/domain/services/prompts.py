"""Prompt templates for the AI assistant."""

import json
from datetime import datetime
from typing import Optional, Sequence

from ..entities.ai_requests import AdaptivePathInput, ExplanationInput, LearningPathRequest, StudyPlanInput
from ..entities.study_session import StudySession
from ..entities.user_profile import UserProfile
from .recommendations import ScoredRow, normalized_score

STUDY_PLAN_SYSTEM = "You are an expert study planner. Always respond with valid JSON."
EXPLANATION_SYSTEM = "You are an expert educational tutor. Always respond with valid JSON."
ANALYSIS_SYSTEM = "You are an expert learning analyst. Always respond with valid JSON."
LEARNING_PATH_SYSTEM = (
    "You are an expert educational curriculum designer. "
    "Always respond with valid, well-structured JSON for learning paths."
)


def format_assessments(rows: Sequence[ScoredRow]) -> str:
    if not rows:
        return "No previous assessments"
    return "\n".join(f"{row.subject}: {round(normalized_score(row) * 100)}%" for row in rows)


def format_sessions(sessions: Sequence[StudySession]) -> str:
    if not sessions:
        return "No study sessions recorded"
    return "\n".join(
        f"{session.scheduled_at:%Y-%m-%d} {session.subject}: {session.duration} min"
        f" ({'completed' if session.completed else 'missed'})"
        for session in sessions
    )


def _grade(profile: Optional[UserProfile]) -> str:
    return (profile.grade_level if profile else "") or "Not specified"


def _goals(profile: Optional[UserProfile]) -> str:
    return ", ".join(profile.learning_goals) if profile and profile.learning_goals else "None stated"


def study_plan_prompt(
    profile: Optional[UserProfile],
    assessments: Sequence[ScoredRow],
    data: StudyPlanInput,
    target_date: datetime,
) -> str:
    return f"""Create a personalized study plan for {profile.full_name if profile and profile.full_name else 'a student'}.

Grade Level: {_grade(profile)}
Learning Goals: {_goals(profile)}
Subjects: {', '.join(data.subjects)}
Study Hours per Day: {data.study_hours}
Target Date: {target_date:%Y-%m-%d}

Recent Assessment Performance:
{format_assessments(assessments)}

Respond with JSON using exactly these fields:
- title: plan title
- duration: total estimated study hours (number)
- subjects: array of {{"name", "priority" ("high"|"medium"|"low"), "allocatedHours", "currentLevel" (0-1)}}
- dailySchedule: {{"sessionsPerDay", "sessionLength" (minutes), "breakTime" (minutes), "optimalTimes" (array), "adaptiveScheduling" (boolean)}}
- weakAreas: array of subject names
- recommendations: array of strings
- milestones: array of {{"subject", "targetWeek", "description", "assessmentRequired"}}

Give weaker subjects more hours and schedule milestones before the target date."""


def explanation_prompt(data: ExplanationInput) -> str:
    return f"""As an expert tutor in {data.subject}, provide a comprehensive explanation for this {data.difficulty} level question:

"{data.question}"

Please structure your response as JSON with these fields:
- concept: Core concept being tested
- stepByStep: Array of step-by-step solution steps
- alternativeMethods: Array of alternative solution approaches
- relatedTopics: Array of related topics to study
- practiceQuestions: Array of 2-3 similar practice questions
- tips: Array of helpful tips and mnemonics
- commonMistakes: Array of common mistakes to avoid

Make the explanation clear and educational for a student at {data.difficulty} level."""


def performance_prompt(assessments: Sequence[ScoredRow], sessions: Sequence[StudySession]) -> str:
    return f"""Analyze this student's learning performance.

Assessment History (newest first):
{format_assessments(assessments)}

Study Sessions (newest first):
{format_sessions(sessions)}

Respond with JSON using exactly these fields:
- overallProgress: {{"overall" (0-100), "trend" ("improving"|"declining"|"steady"|"insufficient_data")}}
- subjectWiseAnalysis: object mapping subject to {{"average", "attempts", "best", "latest"}} (scores 0-1)
- learningTrends: object mapping subject to a trend word
- strengthsAndWeaknesses: {{"strengths": [...], "weaknesses": [...]}}
- studyPatterns: {{"totalSessions", "completedSessions", "completionRate" (0-1), "totalMinutes", "averageSessionMinutes", "mostStudiedSubject"}}
- recommendations: array of strings
- predictedOutcomes: object mapping subject to a predicted next score (0-100)
- adaptiveSuggestions: array of strings"""


def adaptive_path_prompt(profile: Optional[UserProfile], data: AdaptivePathInput, duration_days: int) -> str:
    preferences = json.dumps(data.preferences) if data.preferences else "None stated"
    return f"""Design an adaptive learning path.

Target Goal: {data.target_goal}
Current Level: {data.current_level}
Timeframe: {duration_days} days
Preferences: {preferences}
Grade Level: {_grade(profile)}
Learning Goals: {_goals(profile)}

Respond with JSON using exactly these fields:
- title: path title
- phases: array of {{"name", "duration" (days), "focus", "level"}}
- adaptiveModules: array of {{"title", "level", "format"}}
- assessmentSchedule: {{"frequencyDays", "checkpoints" (array of day numbers)}}
- personalizedContent: array of strings
- progressTracking: {{"metrics" (array), "reviewIntervalDays"}}
- adaptationTriggers: array of {{"condition", "action"}}

Phase durations must add up to the timeframe."""


def learning_path_prompt(
    request: LearningPathRequest,
    profile: Optional[UserProfile],
    assessments: Sequence[ScoredRow],
) -> str:
    return f"""Generate a comprehensive, personalized learning path for a student with the following profile:

Target Goal: {request.target_goal}
Subjects: {', '.join(request.subjects)}
Timeframe: {request.timeframe} days
Study Hours per Day: {request.study_hours_per_day}
Difficulty Level: {request.difficulty_level.value}
Learning Style: {request.learning_style}
Grade Level: {_grade(profile)}

Previous Assessment Performance:
{format_assessments(assessments)}

Please create a detailed learning path with the following JSON structure:
{{
  "title": "Learning Path Title",
  "description": "Brief description of the learning path",
  "totalDuration": number (in days),
  "phases": [
    {{
      "name": "Phase name",
      "duration": number (in days),
      "objectives": ["objective1", "objective2"],
      "topics": [
        {{
          "name": "Topic name",
          "estimatedHours": number,
          "difficulty": "beginner|intermediate|advanced",
          "prerequisites": ["prerequisite1"],
          "resources": ["resource1", "resource2"],
          "assessmentType": "quiz|practice|project"
        }}
      ]
    }}
  ],
  "milestones": [
    {{
      "week": number,
      "title": "Milestone title",
      "description": "What should be achieved",
      "assessmentRequired": boolean
    }}
  ],
  "studySchedule": {{
    "dailyStructure": "Recommended daily study structure",
    "weeklyPattern": "Weekly pattern recommendations",
    "breakRecommendations": "Break and rest recommendations"
  }},
  "adaptiveElements": {{
    "difficultyProgression": "How difficulty increases over time",
    "personalizedTips": ["tip1", "tip2"],
    "strengthFocus": "Areas to focus on based on strengths",
    "weaknessImprovement": "Plans for improving weak areas"
  }},
  "resources": {{
    "books": ["book1", "book2"],
    "onlineResources": ["url1", "url2"],
    "practiceTools": ["tool1", "tool2"],
    "videoLectures": ["lecture1", "lecture2"]
  }}
}}

Ensure the path is:
1. Personalized to the student's level and learning style
2. Progressive in difficulty
3. Includes regular assessment points
4. Accounts for the available time and study hours
5. Focuses on the target goal while building foundational knowledge"""
