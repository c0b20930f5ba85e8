"""Escalation pipeline for chatbot messages.

1. Analyzes the message for risk language
2. Records a risk entry and raises an emergency alert when risk is found
3. Builds the crisis reply for high and critical risk
"""

from .handler import EscalationOutcome, EscalationService

__all__ = ["EscalationOutcome", "EscalationService"]
