"""Alert Service configuration."""
import os
from dataclasses import dataclass

from mindcare.shared.models import EXCERPT_MAX_LENGTH


@dataclass(frozen=True)
class AlertServiceConfig:
    """Intake and triage behavior for emergency alerts.

    strict_transitions=False keeps the legacy behavior where any
    non-empty status string is written unconditionally.
    """
    excerpt_max_length: int = EXCERPT_MAX_LENGTH
    default_list_limit: int = 200
    strict_transitions: bool = False
    schema_init_on_startup: bool = True

    @classmethod
    def from_env(cls) -> "AlertServiceConfig":
        """Create config from environment variables.

        Environment variables:
            ALERT_LIST_LIMIT: Alerts returned by the listing (default 200)
            ALERT_STRICT_TRANSITIONS: Enforce the triage transition table
            SCHEMA_INIT_ON_STARTUP: Ensure the table when the app starts
        """
        return cls(
            default_list_limit=int(os.getenv("ALERT_LIST_LIMIT", "200")),
            strict_transitions=os.getenv("ALERT_STRICT_TRANSITIONS", "false").lower() == "true",
            schema_init_on_startup=os.getenv("SCHEMA_INIT_ON_STARTUP", "true").lower() == "true",
        )
