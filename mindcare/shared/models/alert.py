"""Emergency alert domain model and triage state machine."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

EXCERPT_MAX_LENGTH = 240


class AlertStatus(Enum):
    """Triage lifecycle of an emergency alert."""
    NEW = "new"
    IN_REVIEW = "in_review"
    ESCALATED = "escalated"
    RESOLVED = "resolved"


# Allowed status changes when triage runs in strict mode.
ALLOWED_TRANSITIONS: Mapping[AlertStatus, FrozenSet[AlertStatus]] = {
    AlertStatus.NEW: frozenset({
        AlertStatus.IN_REVIEW,
        AlertStatus.ESCALATED,
        AlertStatus.RESOLVED,
    }),
    AlertStatus.IN_REVIEW: frozenset({
        AlertStatus.ESCALATED,
        AlertStatus.RESOLVED,
    }),
    AlertStatus.ESCALATED: frozenset({
        AlertStatus.IN_REVIEW,
        AlertStatus.RESOLVED,
    }),
    AlertStatus.RESOLVED: frozenset({
        AlertStatus.IN_REVIEW,  # reopen
    }),
}


def can_transition(current: str, target: str) -> bool:
    """Check a status change against the transition table.

    Unknown current values (written in compatibility mode) may only move
    to a known status, never to another unknown one.
    """
    try:
        target_status = AlertStatus(target)
    except ValueError:
        return False

    try:
        current_status = AlertStatus(current)
    except ValueError:
        return True

    return target_status in ALLOWED_TRANSITIONS[current_status]


@dataclass
class EmergencyAlert:
    """Escalated conversation event awaiting human triage.

    Only `status` and `updated_at` change after creation.
    """
    user_id: str
    risk_level: str
    is_heavy: bool
    excerpt: str
    full_text: str
    created_at: datetime
    updated_at: datetime
    status: str = AlertStatus.NEW.value
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[int] = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("EmergencyAlert requires a user_id")
        if len(self.excerpt) > EXCERPT_MAX_LENGTH:
            raise ValueError(f"Excerpt longer than {EXCERPT_MAX_LENGTH} characters")
        if not self.status:
            raise ValueError("EmergencyAlert status cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "riskLevel": self.risk_level,
            "isHeavy": self.is_heavy,
            "excerpt": self.excerpt,
            "fullText": self.full_text,
            "status": self.status,
            "metadata": dict(self.metadata),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
