"""Alert Service: emergency alert intake and human triage.

Endpoints:
- POST /api/chatbot/tracking - Create alert
- GET /api/chatbot/tracking - List alerts
- PATCH /api/chatbot/tracking - Update alert status
"""

from .alert_repository import AlertRepository, ALERTS_TABLE
from .handler import AlertTriageService
from .payloads import AlertDraft, adapt_payload, detect_shape, from_canonical, from_legacy

__all__ = [
    "AlertRepository",
    "ALERTS_TABLE",
    "AlertTriageService",
    "AlertDraft",
    "adapt_payload",
    "detect_shape",
    "from_canonical",
    "from_legacy",
]
