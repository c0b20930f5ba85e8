"""Tests for the alert tracking HTTP endpoints."""
from unittest.mock import MagicMock

import pytest

from mindcare.services.alert_service import AlertTriageService
from mindcare.services.alert_service import http_handler
from mindcare.services.alert_service.config import AlertServiceConfig
from mindcare.shared.errors import StoreUnavailableError
from mindcare.shared.utils import configure_pii_salt

URL = "/api/chatbot/tracking"


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def service(monkeypatch):
    fresh = AlertTriageService()
    monkeypatch.setattr(http_handler, "alert_service", fresh)
    return fresh


@pytest.fixture
def client(service):
    http_handler.app.config["TESTING"] = True
    return http_handler.app.test_client()


@pytest.fixture
def broken(monkeypatch):
    failing = MagicMock()
    monkeypatch.setattr(http_handler, "alert_service", failing)
    return failing


class TestProbes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["service"] == "alert-service"

    def test_ready_with_memory_store(self, client):
        assert client.get("/ready").status_code == 200


class TestCreateAlert:
    def test_legacy_payload(self, client, service):
        response = client.post(URL, json={
            "userId": "u1",
            "userMessage": "I feel hopeless",
            "riskLevel": "high",
        })

        assert response.status_code == 201
        body = response.get_json()
        assert body == {"ok": True, "id": 1}
        stored = service.repository.find_by_id(1)
        assert stored.full_text == "I feel hopeless"
        assert stored.is_heavy is True
        assert stored.status == "new"

    def test_missing_user_id(self, client, service):
        response = client.post(URL, json={"fullText": "hi"})

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing userId"}
        assert service.repository.count() == 0

    def test_store_unavailable(self, client, broken):
        broken.create_alert.side_effect = StoreUnavailableError("down")

        response = client.post(URL, json={"userId": "u1"})

        assert response.status_code == 503
        assert response.get_json() == {"error": "DB not ready"}

    def test_unexpected_error_is_opaque(self, client, broken):
        broken.create_alert.side_effect = RuntimeError("constraint detail")

        response = client.post(URL, json={"userId": "u1"})

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to create alert"}


class TestListAlerts:
    def test_lists_newest_first(self, client):
        client.post(URL, json={"userId": "u1", "fullText": "first"})
        client.post(URL, json={"userId": "u2", "fullText": "second"})

        response = client.get(URL)

        assert response.status_code == 200
        alerts = response.get_json()["alerts"]
        assert [a["fullText"] for a in alerts] == ["second", "first"]
        assert set(alerts[0]) >= {
            "id", "userId", "riskLevel", "isHeavy", "excerpt",
            "fullText", "status", "createdAt", "updatedAt",
        }

    def test_limit(self, client):
        for i in range(3):
            client.post(URL, json={"userId": f"u{i}"})

        assert len(client.get(f"{URL}?limit=2").get_json()["alerts"]) == 2

    def test_store_unavailable(self, client, broken):
        broken.list_alerts.side_effect = StoreUnavailableError("down")

        assert client.get(URL).status_code == 503


class TestUpdateStatus:
    def test_update(self, client, service):
        client.post(URL, json={"userId": "u1"})

        response = client.patch(URL, json={"id": 1, "status": "resolved"})

        assert response.status_code == 200
        assert response.get_json() == {"ok": True}
        assert service.repository.find_by_id(1).status == "resolved"

    def test_unknown_id(self, client, service):
        client.post(URL, json={"userId": "u1"})

        response = client.patch(URL, json={"id": 999, "status": "resolved"})

        assert response.status_code == 404
        assert response.get_json() == {"error": "Not found"}
        assert service.repository.find_by_id(1).status == "new"

    def test_missing_fields(self, client):
        response = client.patch(URL, json={"status": "resolved"})

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing id or status"}

    def test_strict_mode_rejects_invalid_transition(self, client, monkeypatch):
        strict = AlertTriageService(config=AlertServiceConfig(strict_transitions=True))
        monkeypatch.setattr(http_handler, "alert_service", strict)
        client.post(URL, json={"userId": "u1"})

        response = client.patch(URL, json={"id": 1, "status": "new"})

        assert response.status_code == 400

    def test_unexpected_error_is_opaque(self, client, broken):
        broken.update_status.side_effect = RuntimeError("boom")

        response = client.patch(URL, json={"id": 1, "status": "resolved"})

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to update alert"}
