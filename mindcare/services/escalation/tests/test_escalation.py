"""Tests for the chat message escalation pipeline."""
from unittest.mock import MagicMock

import pytest

from mindcare.services.alert_service import AlertTriageService
from mindcare.services.escalation import EscalationService
from mindcare.services.risk_service import RiskIntakeService
from mindcare.shared.errors import StoreUnavailableError
from mindcare.shared.models import EmergencyTeamContact, RiskLevel
from mindcare.shared.utils import configure_pii_salt

TEAM = EmergencyTeamContact(
    name="Night Desk",
    email="desk@example.org",
    phone="+8800000000",
    region="Bangladesh",
)


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def escalation():
    return EscalationService(
        risk_service=RiskIntakeService(),
        alert_service=AlertTriageService(),
        region="BD",
        team=TEAM,
    )


class TestProcessMessage:
    def test_low_risk_message_is_not_stored(self, escalation):
        outcome = escalation.process_message(5, "Had a good day today")

        assert outcome.escalated is False
        assert outcome.crisis_response is None
        assert outcome.alert is None
        assert outcome.risk_record is None
        assert escalation.alert_service.repository.count() == 0
        assert escalation.risk_service.repository.count() == 0

    def test_medium_risk_flags_for_review(self, escalation):
        outcome = escalation.process_message(5, "I feel hopeless")

        assert outcome.escalated is True
        assert outcome.crisis_response is None
        assert outcome.alert.risk_level == "medium"
        assert outcome.alert.is_heavy is True
        assert outcome.alert.full_text == "I feel hopeless"
        assert outcome.alert.user_id == "5"
        assert outcome.risk_record.action_taken == "flagged_for_review"
        assert outcome.risk_record.indicator == "hopeless"

    def test_critical_message_gets_crisis_reply(self, escalation):
        outcome = escalation.process_message(5, "I want to end my life tonight")

        assert outcome.assessment.risk_level == RiskLevel.CRITICAL
        assert "call 999" in outcome.crisis_response
        assert "Night Desk" in outcome.crisis_response
        assert outcome.alert.status == "new"
        assert outcome.risk_record.risk_score == 10
        assert outcome.risk_record.risk_type == "suicidal-ideation"
        assert outcome.risk_record.action_taken == "crisis_resources_shown"

    def test_store_failure_does_not_block_crisis_reply(self):
        alert_service = MagicMock()
        alert_service.create_alert.side_effect = StoreUnavailableError("down")
        risk_service = MagicMock()
        risk_service.record_risk.side_effect = RuntimeError("boom")
        escalation = EscalationService(
            risk_service=risk_service,
            alert_service=alert_service,
            region="BD",
            team=TEAM,
        )

        outcome = escalation.process_message(5, "I want to die")

        assert outcome.crisis_response is not None
        assert outcome.alert is None
        assert outcome.risk_record is None
        risk_service.record_risk.assert_called_once()

    def test_alert_failure_still_records_risk(self, escalation, monkeypatch):
        monkeypatch.setattr(
            escalation.alert_service,
            "create_alert",
            MagicMock(side_effect=StoreUnavailableError("down")),
        )

        outcome = escalation.process_message(5, "I want to hurt myself")

        assert outcome.alert is None
        assert outcome.risk_record is not None
        assert escalation.risk_service.repository.count() == 1

    def test_unknown_region_uses_generic_resources(self):
        escalation = EscalationService(region="ZZ", team=TEAM)

        outcome = escalation.process_message(5, "thinking about suicide")

        assert "local emergency number" in outcome.crisis_response
