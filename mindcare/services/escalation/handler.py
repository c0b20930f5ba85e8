"""Chat message escalation - analysis, persistence and crisis reply.

Runs for every chatbot message. When analysis finds risk, the message is
recorded as a risk entry and raised as an emergency alert for human
review. For high and critical risk the user immediately gets the crisis
reply.

Failure Handling:
    - Persistence failures never block the crisis reply
    - Failures are logged at ERROR level for alerting
"""
import logging
from dataclasses import dataclass
from typing import Optional

from mindcare.services.alert_service import AlertTriageService
from mindcare.services.crisis_resources import build_crisis_response, default_team
from mindcare.services.risk_service import RiskAssessment, RiskIntakeService, analyze_message
from mindcare.shared.models import EmergencyAlert, EmergencyTeamContact, RiskRecord
from mindcare.shared.utils import hash_pii

logger = logging.getLogger(__name__)

CRISIS_RESOURCES_SHOWN = "crisis_resources_shown"
FLAGGED_FOR_REVIEW = "flagged_for_review"


@dataclass
class EscalationOutcome:
    """What the pipeline did with one message."""
    assessment: RiskAssessment
    risk_record: Optional[RiskRecord] = None
    alert: Optional[EmergencyAlert] = None
    crisis_response: Optional[str] = None

    @property
    def escalated(self) -> bool:
        return self.assessment.requires_escalation


class EscalationService:
    """Connects message analysis to the risk and alert stores."""

    def __init__(
        self,
        risk_service: Optional[RiskIntakeService] = None,
        alert_service: Optional[AlertTriageService] = None,
        region: Optional[str] = None,
        team: Optional[EmergencyTeamContact] = None,
    ):
        self.risk_service = risk_service or RiskIntakeService()
        self.alert_service = alert_service or AlertTriageService()
        self.region = region
        self.team = team if team is not None else default_team()

    def process_message(self, user_id: int, text: str) -> EscalationOutcome:
        """Analyze a message and escalate it if needed.

        Args:
            user_id: Sender's user id
            text: Raw message text

        Returns:
            EscalationOutcome with whatever was stored and the crisis
            reply, if one is due
        """
        assessment = analyze_message(text)
        outcome = EscalationOutcome(assessment=assessment)

        if assessment.requires_crisis_response:
            outcome.crisis_response = build_crisis_response(self.region, self.team)

        if not assessment.requires_escalation:
            return outcome

        logger.warning(
            "MESSAGE_ESCALATED",
            extra={
                "user_id_hash": hash_pii(user_id),
                "risk_level": assessment.risk_level.value,
                "risk_type": assessment.risk_type.value,
                "risk_score": assessment.risk_score,
            }
        )

        action_taken = CRISIS_RESOURCES_SHOWN if outcome.crisis_response else FLAGGED_FOR_REVIEW

        try:
            outcome.alert = self.alert_service.create_alert({
                "userId": user_id,
                "riskLevel": assessment.risk_level.value,
                "isHeavy": assessment.is_heavy,
                "fullText": text,
            })
        except Exception as e:
            logger.error(
                "ESCALATION_ALERT_FAILED",
                extra={"user_id_hash": hash_pii(user_id), "error": str(e)}
            )

        try:
            outcome.risk_record = self.risk_service.record_risk({
                "userId": user_id,
                "riskLevel": assessment.risk_level.value,
                "riskScore": assessment.risk_score,
                "riskType": assessment.risk_type.value,
                "indicator": ", ".join(assessment.matched_phrases) or None,
                "actionTaken": action_taken,
            })
        except Exception as e:
            logger.error(
                "ESCALATION_RISK_FAILED",
                extra={"user_id_hash": hash_pii(user_id), "error": str(e)}
            )

        return outcome
