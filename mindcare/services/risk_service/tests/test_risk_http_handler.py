"""Tests for the risk service HTTP endpoints."""
from unittest.mock import MagicMock

import pytest

from mindcare.services.risk_service import RiskIntakeService
from mindcare.services.risk_service import http_handler
from mindcare.shared.errors import StoreUnavailableError
from mindcare.shared.utils import configure_pii_salt


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def service(monkeypatch):
    fresh = RiskIntakeService()
    monkeypatch.setattr(http_handler, "risk_service", fresh)
    return fresh


@pytest.fixture
def client(service):
    http_handler.app.config["TESTING"] = True
    return http_handler.app.test_client()


class TestProbes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["service"] == "risk-service"

    def test_ready_with_memory_store(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.get_json()["backend"] == "memory"


class TestCreateRisk:
    def test_created(self, client):
        response = client.post("/api/risk", json={
            "userId": 5,
            "riskLevel": "moderate",
            "riskType": "self-harm-language",
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data["id"] == 1
        assert data["userId"] == 5
        assert data["riskScore"] == 1
        assert data["detectedAt"]

    def test_missing_fields(self, client, service):
        response = client.post("/api/risk", json={"userId": 5, "riskType": "x"})

        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing required fields"}
        assert service.repository.count() == 0

    def test_invalid_json_body(self, client):
        response = client.post("/api/risk", data="not json", content_type="application/json")

        assert response.status_code == 400

    def test_store_unavailable(self, client, monkeypatch):
        broken = MagicMock()
        broken.record_risk.side_effect = StoreUnavailableError("pool down")
        monkeypatch.setattr(http_handler, "risk_service", broken)

        response = client.post("/api/risk", json={"userId": 5, "riskLevel": "low", "riskType": "x"})

        assert response.status_code == 500
        assert response.get_json() == {"error": "Database not available"}

    def test_unexpected_error_is_opaque(self, client, monkeypatch):
        broken = MagicMock()
        broken.record_risk.side_effect = RuntimeError("secret detail")
        monkeypatch.setattr(http_handler, "risk_service", broken)

        response = client.post("/api/risk", json={"userId": 5, "riskLevel": "low", "riskType": "x"})

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to create risk entry"}


class TestListRisks:
    def test_lists_newest_first(self, client):
        for level in ("low", "high"):
            client.post("/api/risk", json={"userId": 5, "riskLevel": level, "riskType": "x"})

        response = client.get("/api/risk?userId=5")

        assert response.status_code == 200
        data = response.get_json()
        assert [r["riskLevel"] for r in data] == ["high", "low"]

    def test_limit(self, client):
        for _ in range(3):
            client.post("/api/risk", json={"userId": 5, "riskLevel": "low", "riskType": "x"})

        response = client.get("/api/risk?userId=5&limit=1")

        assert len(response.get_json()) == 1

    def test_user_id_required(self, client):
        response = client.get("/api/risk")

        assert response.status_code == 400
        assert response.get_json() == {"error": "User ID is required"}

    def test_unexpected_error_is_opaque(self, client, monkeypatch):
        broken = MagicMock()
        broken.list_risks.side_effect = RuntimeError("boom")
        monkeypatch.setattr(http_handler, "risk_service", broken)

        response = client.get("/api/risk?userId=5")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch risk data"}
