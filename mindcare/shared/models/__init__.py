"""Shared domain models for MindCare services."""
from .risk import (
    RiskLevel,
    RiskType,
    RiskRecord,
    DEFAULT_RISK_SCORE,
    coerce_risk_score,
    parse_positive_int,
)
from .alert import (
    AlertStatus,
    ALLOWED_TRANSITIONS,
    EXCERPT_MAX_LENGTH,
    EmergencyAlert,
    can_transition,
)
from .crisis import CrisisResourceSet, EmergencyTeamContact

__all__ = [
    "RiskLevel",
    "RiskType",
    "RiskRecord",
    "DEFAULT_RISK_SCORE",
    "coerce_risk_score",
    "parse_positive_int",
    "AlertStatus",
    "ALLOWED_TRANSITIONS",
    "EXCERPT_MAX_LENGTH",
    "EmergencyAlert",
    "can_transition",
    "CrisisResourceSet",
    "EmergencyTeamContact",
]
