"""Risk Service configuration."""
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class RiskServiceConfig:
    """Listing limits for risk history queries."""
    default_list_limit: int = 10
    max_list_limit: int = 100
    schema_init_on_startup: bool = True

    @classmethod
    def from_env(cls) -> "RiskServiceConfig":
        return cls(
            default_list_limit=int(os.getenv("RISK_LIST_LIMIT", "10")),
            max_list_limit=int(os.getenv("RISK_LIST_MAX_LIMIT", "100")),
            schema_init_on_startup=os.getenv("SCHEMA_INIT_ON_STARTUP", "true").lower() == "true",
        )
