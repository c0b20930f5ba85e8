"""Risk level and risk record domain models."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class RiskLevel(Enum):
    """Risk levels produced by the message analyzer.

    Stored records accept any non-empty level string; these are the
    values the system itself emits.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskType(Enum):
    """Risk categories produced by the message analyzer."""
    SUICIDAL_IDEATION = "suicidal-ideation"
    SELF_HARM = "self-harm"
    SUBSTANCE_ABUSE = "substance-abuse"
    CRISIS = "crisis"
    OTHER = "other"


DEFAULT_RISK_SCORE = 1


def coerce_risk_score(value: Any) -> float:
    """Return value if it is a real number, otherwise the default score.

    Booleans and numeric strings are not numbers here.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_RISK_SCORE
    return value


def parse_positive_int(value: Any) -> Optional[int]:
    """Parse an identifier the way query strings deliver it.

    Returns None for anything that is not a positive integer.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


@dataclass(frozen=True)
class RiskRecord:
    """A single detected risk-signal event tied to a user.

    Immutable - records are never updated after creation.
    """
    user_id: int
    risk_level: str
    risk_score: float
    risk_type: str
    detected_at: datetime
    indicator: Optional[str] = None
    action_taken: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("RiskRecord requires a user_id")
        if not self.risk_level or not self.risk_type:
            raise ValueError("RiskRecord requires risk_level and risk_type")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "riskLevel": self.risk_level,
            "riskScore": self.risk_score,
            "riskType": self.risk_type,
            "indicator": self.indicator,
            "actionTaken": self.action_taken,
            "detectedAt": self.detected_at.isoformat(),
        }
