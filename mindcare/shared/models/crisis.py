"""Crisis resource and emergency contact value objects.

Neither is persisted; both are resolved fresh per request.
"""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CrisisResourceSet:
    """Region-specific emergency number and self-help guidance."""
    region_name: str
    emergency: Optional[str]
    crisis_link: Optional[str]
    guidance: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EmergencyTeamContact:
    """Human team reachable for escalated cases."""
    name: str
    email: str
    phone: str
    region: str = "Bangladesh"
