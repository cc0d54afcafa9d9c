"""
Tests for the HTTP API.
"""
import pytest
from fastapi.testclient import TestClient

from soft75.database import get_db
from soft75.main import app, get_challenge_service


@pytest.fixture
def client(challenge_service, session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_challenge_service] = lambda: challenge_service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestChallengeEndpoints:
    """Tests for challenge and checklist endpoints"""

    def test_health(self, client):
        assert client.get("/").json()["status"] == "active"

    def test_initial_state(self, client):
        response = client.get("/api/challenge")

        assert response.status_code == 200
        body = response.json()
        assert body["current_day"] == 0
        assert body["phase"] == "not_started"
        assert body["last_completed_date"] is None

    def test_today_checklist(self, client):
        body = client.get("/api/checklist/today").json()

        assert body["is_fully_complete"] is False
        assert body["water_done"] is False

    def test_completing_all_tasks(self, client):
        for task in ("water", "reading", "diet"):
            body = client.post(f"/api/checklist/today/{task}").json()
            assert body["outcome"] == "no_change"

        body = client.post("/api/checklist/today/workout").json()

        assert body["outcome"] == "advanced"
        assert body["state"]["current_day"] == 1
        assert body["state"]["phase"] == "in_progress"
        assert body["checklist"]["is_fully_complete"] is True
        assert body["snapshot"]["currentDay"] == 1
        assert body["snapshot"]["streakCount"] == 1

        widget = client.get("/api/widget").json()
        assert widget["currentDay"] == 1

    def test_unknown_task(self, client):
        response = client.post("/api/checklist/today/yoga")

        assert response.status_code == 200
        assert response.json()["outcome"] == "no_change"

    def test_reset(self, client):
        client.post("/api/checklist/today/water")

        body = client.post("/api/challenge/reset").json()

        assert body["outcome"] == "reset"
        assert body["state"]["reset_count"] == 1
        assert body["checklist"]["water_done"] is False

    def test_jump_forbidden_by_default(self, client):
        response = client.post("/api/challenge/jump", json={"day": 74})

        assert response.status_code == 403

    def test_jump_with_developer_options(self, client):
        settings = client.get("/api/settings").json()
        settings["developer_options_enabled"] = True
        client.put("/api/settings", json=settings)

        body = client.post("/api/challenge/jump", json={"day": 74}).json()

        assert body["outcome"] == "jumped"
        assert body["state"]["current_day"] == 74
        assert all(body["snapshot"]["tasks"].values())

    def test_jump_rejects_negative_day(self, client):
        response = client.post("/api/challenge/jump", json={"day": -2})

        assert response.status_code == 422

    def test_forgiveness(self, client):
        body = client.put("/api/challenge/forgiveness", json={"forgive_missed_day": True}).json()

        assert body["forgive_missed_day"] is True
        assert body["forgive_missed_task"] is False

    def test_clear_all_data(self, client):
        client.post("/api/challenge/reset")

        body = client.delete("/api/data").json()

        assert body["reset_count"] == 0


class TestSettingsEndpoints:
    """Tests for settings endpoints"""

    def test_defaults(self, client):
        body = client.get("/api/settings").json()

        assert body["one_way_tasks"] is True
        assert body["milestone_days"] == "7,30,75"

    def test_invalid_reminder_time(self, client):
        settings = client.get("/api/settings").json()
        settings["daily_reminder_time"] = "25:00"

        assert client.put("/api/settings", json=settings).status_code == 422

    def test_invalid_milestones(self, client):
        settings = client.get("/api/settings").json()
        settings["milestone_days"] = "7,0"

        assert client.put("/api/settings", json=settings).status_code == 422


class TestHistoryAndNotifications:
    """Tests for history and notification endpoints"""

    def test_history(self, client):
        for task in ("water", "reading", "diet", "workout"):
            client.post(f"/api/checklist/today/{task}")

        body = client.get("/api/history?days=7").json()

        assert body["total_completed"] == 1
        assert body["current_day"] == 1
        assert len(body["completion_by_date"]) == 7
        assert body["completion_by_date"][-1]["completed"] is True

    def test_history_days_bounds(self, client):
        assert client.get("/api/history?days=0").status_code == 400

    def test_notifications_flow(self, client, session_factory):
        from soft75.services.notification_service import NotificationService
        db = session_factory()
        try:
            notification_id = NotificationService(db).send_daily_reminder().id
        finally:
            db.close()

        listed = client.get("/api/notifications").json()
        assert [n["id"] for n in listed] == [notification_id]

        body = client.post(f"/api/notifications/{notification_id}/read").json()
        assert body["read"] is True
        assert client.get("/api/notifications?unread_only=true").json() == []

    def test_mark_missing_notification(self, client):
        assert client.post("/api/notifications/404/read").status_code == 404
