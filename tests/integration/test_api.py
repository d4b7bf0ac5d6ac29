"""Integration tests for the FastAPI routes with in-memory providers."""

import uuid

import pytest
from fastapi.testclient import TestClient

from study_coach.application import api
from study_coach.application.controller import StudyCoachController
from study_coach.infrastructure.local_quiz_session_repository import LocalQuizSessionRepository
from study_coach.infrastructure.local_row_store import LocalRowStore
from study_coach.infrastructure.static_completion_client import (
    StaticCompletionClient,
    UnconfiguredCompletionClient,
)

USER_ID = "user-42"
MATH_ANSWERS = [0, 1, 1, 2, 1]


def make_controller(completion_client=None) -> StudyCoachController:
    return StudyCoachController(
        row_store=LocalRowStore(),
        completion_client=completion_client or StaticCompletionClient(),
        quiz_repository=LocalQuizSessionRepository(),
        max_tokens=3000,
    )


@pytest.fixture
def controller(monkeypatch):
    controller = make_controller()
    monkeypatch.setattr(api, "controller", controller)
    return controller


@pytest.fixture
def client(controller):
    return TestClient(api.app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["providers"]["completion_client"] == "StaticCompletionClient"


class TestAIAssistantRoute:
    """POST /ai-assistant."""

    def test_preflight(self, client):
        response = client.options("/ai-assistant")

        assert response.status_code == 200
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"

    def test_malformed_body(self, client):
        response = client.post("/ai-assistant", content="{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Request body must be valid JSON"}

    def test_unknown_type(self, client):
        response = client.post("/ai-assistant", json={"type": "horoscope", "data": {}, "userId": USER_ID})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"].startswith("type:")

    def test_missing_user_id(self, client):
        response = client.post("/ai-assistant", json={"type": "study-plan", "data": {}})

        assert response.status_code == 400
        assert "userId" in response.json()["error"]

    def test_explanation(self, client):
        response = client.post(
            "/ai-assistant",
            json={
                "type": "question-explanation",
                "data": {"question": "What is 2 + 2?", "subject": "Mathematics"},
                "userId": USER_ID,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["concept"] == "Core concepts in Mathematics"
        assert body["data"]["stepByStep"]

    def test_study_plan_is_persisted(self, client, controller):
        response = client.post(
            "/ai-assistant",
            json={"type": "study-plan", "data": {"subjects": ["Physics"], "studyHours": 2}, "userId": USER_ID},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["dailySchedule"]["sessionsPerDay"] == 1
        assert data["id"]

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(
            api, "controller", make_controller(UnconfiguredCompletionClient("OpenAI API key not configured"))
        )
        client = TestClient(api.app)

        response = client.post(
            "/ai-assistant",
            json={"type": "question-explanation", "data": {"question": "Why?"}, "userId": USER_ID},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "OpenAI API key not configured"}


class TestGenerateLearningPathRoute:
    """POST /generate-learning-path."""

    def test_needs_subjects_or_results(self, client):
        response = client.post("/generate-learning-path", json={"userId": USER_ID})

        assert response.status_code == 400
        assert "subjects or assessmentResults" in response.json()["error"]

    def test_generates_and_stores_path(self, client):
        response = client.post(
            "/generate-learning-path",
            json={"userId": USER_ID, "subjects": ["Chemistry"], "targetGoal": "NEET", "timeframe": 28},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "NEET Learning Path"
        assert data["totalDuration"] == 28
        assert data["created_at"]

        dashboard = client.get(f"/dashboard/{USER_ID}").json()
        assert [path["id"] for path in dashboard["learning_paths"]] == [data["id"]]


class TestAssessmentRoutes:
    """Quiz routes."""

    def test_questions_hide_answers(self, client):
        response = client.get("/assessments/questions", params={"subject": "Physics"})

        assert response.status_code == 200
        questions = response.json()["questions"]
        assert len(questions) == 5
        assert all("correct_answer" not in question for question in questions)

    def test_unknown_subject(self, client):
        response = client.get("/assessments/questions", params={"subject": "Astrology"})

        assert response.status_code == 400

    def test_full_quiz(self, client):
        step = client.post("/assessments", json={"user_id": USER_ID, "subject": "Mathematics"}).json()
        quiz_id = step["quiz_id"]

        assert client.post(f"/assessments/{quiz_id}/next").status_code == 422

        for option in MATH_ANSWERS:
            client.post(f"/assessments/{quiz_id}/answer", json={"option": option})
            step = client.post(f"/assessments/{quiz_id}/next").json()

        assert step["status"] == "completed"
        assert step["result"]["score"] == 5
        assert step["result"]["difficulty_level"] == "advanced"

        dashboard = client.get(f"/dashboard/{USER_ID}").json()
        assert dashboard["stats"]["assessments_taken"] == 1
        assert dashboard["stats"]["average_score"] == 100

    def test_previous_keeps_answer(self, client):
        quiz_id = client.post("/assessments", json={"user_id": USER_ID, "subject": "Chemistry"}).json()["quiz_id"]
        client.post(f"/assessments/{quiz_id}/answer", json={"option": 2})
        client.post(f"/assessments/{quiz_id}/next")

        step = client.post(f"/assessments/{quiz_id}/previous").json()

        assert step["position"] == 1
        assert step["selected_option"] == 2

    def test_unknown_quiz(self, client):
        response = client.post(f"/assessments/{uuid.uuid4()}/next")

        assert response.status_code == 404


class TestDashboardRoutes:
    """Dashboard routes."""

    def test_empty_dashboard(self, client):
        response = client.get(f"/dashboard/{USER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["display_name"] == "Student"
        assert body["learning_paths"] == []
        assert body["requests"]["study-plan"] == {"state": "idle", "error": None}

    def test_study_plan_then_analysis(self, client):
        plan = client.post(f"/dashboard/{USER_ID}/study-plan")
        analysis = client.post(f"/dashboard/{USER_ID}/performance-analysis")

        assert plan.status_code == 200
        assert analysis.status_code == 200
        body = client.get(f"/dashboard/{USER_ID}").json()
        assert len(body["learning_paths"]) == 2
        assert body["requests"]["study-plan"]["state"] == "succeeded"
        assert body["requests"]["performance-analysis"]["state"] == "succeeded"

    def test_failed_request_is_reported(self, monkeypatch):
        monkeypatch.setattr(
            api, "controller", make_controller(UnconfiguredCompletionClient("OpenAI API key not configured"))
        )
        client = TestClient(api.app)

        response = client.post(f"/dashboard/{USER_ID}/study-plan")

        assert response.status_code == 500
        body = client.get(f"/dashboard/{USER_ID}").json()
        assert body["requests"]["study-plan"] == {"state": "failed", "error": "OpenAI API key not configured"}


class TestRowRoutes:
    """Profile, goal, study session and learning path routes."""

    def test_profile(self, client):
        assert client.get(f"/profile/{USER_ID}").status_code == 404

        saved = client.put(
            f"/profile/{USER_ID}",
            json={"email": "ravi@example.com", "full_name": "Ravi Kumar", "learning_goals": ["jee-prep", "jee-prep"]},
        )

        assert saved.status_code == 200
        assert saved.json()["learning_goals"] == ["jee-prep"]
        assert client.get(f"/profile/{USER_ID}").json()["full_name"] == "Ravi Kumar"
        assert client.get(f"/dashboard/{USER_ID}").json()["display_name"] == "Ravi"

    def test_goal_progress(self, client):
        created = client.post(
            "/goals", json={"user_id": USER_ID, "title": "Finish organic chemistry", "target_date": "2026-12-01"}
        )
        assert created.status_code == 201
        goal_id = created.json()["id"]

        updated = client.patch(f"/goals/{goal_id}/progress", json={"progress": 100})

        assert updated.json()["status"] == "completed"
        assert client.patch(f"/goals/{uuid.uuid4()}/progress", json={"progress": 10}).status_code == 404
        assert client.patch(f"/goals/{goal_id}/progress", json={"progress": 101}).status_code == 422

    def test_study_session_completion(self, client):
        created = client.post(
            "/study-sessions",
            json={"user_id": USER_ID, "subject": "Physics", "duration": 45, "scheduled_at": "2026-05-01T09:00:00Z"},
        )
        session_id = created.json()["id"]

        completed = client.post(f"/study-sessions/{session_id}/complete")

        assert completed.status_code == 200
        assert completed.json()["completed"] is True

    def test_learning_path_progress(self, client):
        path_id = client.post(
            "/generate-learning-path", json={"userId": USER_ID, "subjects": ["Physics"]}
        ).json()["data"]["id"]

        response = client.patch(f"/learning-paths/{path_id}/progress", json={"progress": 40})

        assert response.status_code == 200
        assert response.json()["progress"] == 40
        assert client.patch(f"/learning-paths/{uuid.uuid4()}/progress", json={"progress": 1}).status_code == 404
