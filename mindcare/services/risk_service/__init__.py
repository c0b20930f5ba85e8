"""Risk Service: intake and history of risk-detection events.

Endpoints:
- POST /api/risk - Record a risk entry
- GET /api/risk - List a user's recent risk entries
"""

from .analyzer import RiskAssessment, analyze_message
from .handler import RiskIntakeService
from .risk_repository import RiskRepository, RISKS_TABLE

__all__ = [
    "RiskAssessment",
    "analyze_message",
    "RiskIntakeService",
    "RiskRepository",
    "RISKS_TABLE",
]
