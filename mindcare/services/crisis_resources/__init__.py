"""Crisis resources: regional emergency guidance for end users.

Resolution is pure and decoupled from persistence; it can run even when
the database is down.
"""

from .resolver import (
    CRISIS_RESOURCES,
    FALLBACK_RESOURCES,
    resolve,
    format_resources,
)
from .emergency_team import (
    normalize_team,
    default_team,
    format_team_contact,
    build_crisis_response,
)

__all__ = [
    "CRISIS_RESOURCES",
    "FALLBACK_RESOURCES",
    "resolve",
    "format_resources",
    "normalize_team",
    "default_team",
    "format_team_contact",
    "build_crisis_response",
]
