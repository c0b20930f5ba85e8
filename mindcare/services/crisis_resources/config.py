"""Crisis resource configuration.

Read once at import time; the default region and emergency team do not
change for the lifetime of the process.
"""
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CrisisConfig:
    """Process-wide crisis messaging settings."""
    default_region: str = "BD"
    team_name: str = "MindCare Emergency Team"
    team_email: str = "support@mindcare.ai"
    team_phone: str = "+8801871535267"
    team_region: str = "Bangladesh"

    @classmethod
    def from_env(cls) -> "CrisisConfig":
        """Create config from environment variables.

        Environment variables:
            CHATBOT_REGION: Default region code (default BD)
            EMERGENCY_TEAM_NAME / _EMAIL / _REGION: Team contact fields
            EMERGENCY_TEAM_PHONE: Team phone, falls back to EMERGENCY_TEAM_CONTACT
        """
        defaults = cls()
        phone = os.getenv("EMERGENCY_TEAM_PHONE") or os.getenv("EMERGENCY_TEAM_CONTACT") or defaults.team_phone
        return cls(
            default_region=(os.getenv("CHATBOT_REGION") or defaults.default_region).strip().upper(),
            team_name=os.getenv("EMERGENCY_TEAM_NAME", defaults.team_name).strip(),
            team_email=os.getenv("EMERGENCY_TEAM_EMAIL", defaults.team_email).strip(),
            team_phone=phone.strip(),
            team_region=os.getenv("EMERGENCY_TEAM_REGION", defaults.team_region).strip(),
        )


CRISIS_CONFIG = CrisisConfig.from_env()
