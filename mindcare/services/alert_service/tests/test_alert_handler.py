"""Tests for alert intake and triage."""
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from mindcare.services.alert_service import AlertRepository, AlertTriageService
from mindcare.services.alert_service.config import AlertServiceConfig
from mindcare.shared.errors import (
    InvalidTransitionError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from mindcare.shared.models import EmergencyAlert
from mindcare.shared.utils import configure_pii_salt, pii


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def service():
    return AlertTriageService()


@pytest.fixture
def strict_service():
    return AlertTriageService(config=AlertServiceConfig(strict_transitions=True))


class TestCreateAlert:
    def test_legacy_payload(self, service):
        alert = service.create_alert({
            "userId": "u1",
            "userMessage": "I feel hopeless",
            "riskLevel": "high",
        })

        assert alert.id == 1
        assert alert.full_text == "I feel hopeless"
        assert alert.excerpt == "I feel hopeless"
        assert alert.is_heavy is True
        assert alert.status == "new"
        assert alert.created_at == alert.updated_at

    def test_minimal_payload(self, service):
        alert = service.create_alert({"userId": "u2"})

        assert alert.full_text == ""
        assert alert.excerpt == ""
        assert alert.risk_level == "low"
        assert alert.is_heavy is False

    def test_missing_user_id_stores_nothing(self, service):
        with pytest.raises(ValidationError):
            service.create_alert({"fullText": "hello"})

        assert service.repository.count() == 0

    def test_unconfigured_salt_stores_nothing(self, service, monkeypatch):
        monkeypatch.setattr(pii, "_PII_SALT", None)

        with pytest.raises(RuntimeError):
            service.create_alert({"userId": "u1", "riskLevel": "high"})

        assert service.repository.count() == 0

    def test_store_unavailable_propagates(self):
        repository = MagicMock(spec=AlertRepository)
        repository.ensure_schema.side_effect = StoreUnavailableError("down")
        service = AlertTriageService(repository=repository)

        with pytest.raises(StoreUnavailableError):
            service.create_alert({"userId": "u1"})

    def test_concurrent_creates_get_distinct_ids(self, service):
        ids = []
        lock = threading.Lock()

        def worker():
            for _ in range(20):
                alert = service.create_alert({"userId": "u1", "fullText": "x"})
                with lock:
                    ids.append(alert.id)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(ids)) == 100


class TestListAlerts:
    def seed(self, service, count):
        base = datetime(2026, 4, 1, tzinfo=timezone.utc)
        for i in range(count):
            created = base + timedelta(seconds=i)
            service.repository.insert(EmergencyAlert(
                user_id=f"u{i}",
                risk_level="low",
                is_heavy=False,
                excerpt="",
                full_text="",
                created_at=created,
                updated_at=created,
            ))

    def test_newest_first(self, service):
        self.seed(service, 4)

        alerts = service.list_alerts()

        created = [a.created_at for a in alerts]
        assert created == sorted(created, reverse=True)
        assert alerts[0].user_id == "u3"

    def test_limit(self, service):
        self.seed(service, 5)

        assert len(service.list_alerts(2)) == 2
        assert len(service.list_alerts("3")) == 3

    def test_default_limit(self):
        service = AlertTriageService(config=AlertServiceConfig(default_list_limit=3))
        self.seed(service, 5)

        assert len(service.list_alerts()) == 3
        assert len(service.list_alerts("nope")) == 3


class TestUpdateStatus:
    def test_updates_status_and_timestamp(self, service):
        alert = service.create_alert({"userId": "u1"})

        updated = service.update_status(alert.id, "in_review")

        assert updated.status == "in_review"
        assert updated.updated_at >= alert.created_at
        assert service.repository.find_by_id(alert.id).status == "in_review"

    def test_string_id_accepted(self, service):
        alert = service.create_alert({"userId": "u1"})

        assert service.update_status(str(alert.id), "resolved").status == "resolved"

    def test_compatibility_mode_accepts_any_label(self, service):
        alert = service.create_alert({"userId": "u1"})

        assert service.update_status(alert.id, "closed").status == "closed"

    def test_unknown_id_leaves_store_unchanged(self, service):
        alert = service.create_alert({"userId": "u1"})

        with pytest.raises(NotFoundError):
            service.update_status(999, "resolved")

        assert service.repository.find_by_id(alert.id).status == "new"

    def test_non_numeric_id_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_status("abc", "resolved")

    @pytest.mark.parametrize("alert_id,status", [
        (None, "resolved"),
        (1, None),
        (1, ""),
        (0, "resolved"),
    ])
    def test_missing_id_or_status(self, service, alert_id, status):
        with pytest.raises(ValidationError, match="Missing id or status"):
            service.update_status(alert_id, status)

    def test_non_string_status(self, service):
        alert = service.create_alert({"userId": "u1"})

        with pytest.raises(ValidationError):
            service.update_status(alert.id, 5)


class TestStrictTransitions:
    def test_allowed_path(self, strict_service):
        alert = strict_service.create_alert({"userId": "u1"})

        strict_service.update_status(alert.id, "in_review")
        strict_service.update_status(alert.id, "escalated")
        final = strict_service.update_status(alert.id, "resolved")

        assert final.status == "resolved"

    def test_reopen_resolved(self, strict_service):
        alert = strict_service.create_alert({"userId": "u1"})
        strict_service.update_status(alert.id, "resolved")

        assert strict_service.update_status(alert.id, "in_review").status == "in_review"

    def test_back_to_new_rejected(self, strict_service):
        alert = strict_service.create_alert({"userId": "u1"})
        strict_service.update_status(alert.id, "in_review")

        with pytest.raises(InvalidTransitionError):
            strict_service.update_status(alert.id, "new")

        assert strict_service.repository.find_by_id(alert.id).status == "in_review"

    def test_unknown_status_rejected(self, strict_service):
        alert = strict_service.create_alert({"userId": "u1"})

        with pytest.raises(InvalidTransitionError):
            strict_service.update_status(alert.id, "closed")
