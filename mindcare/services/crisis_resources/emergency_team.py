"""Emergency team contact shown alongside crisis replies."""
import logging
from typing import Any, Mapping, Optional

from mindcare.shared.models import EmergencyTeamContact
from .config import CRISIS_CONFIG, CrisisConfig
from .resolver import format_resources, resolve

logger = logging.getLogger(__name__)

DEFAULT_TEAM_REGION = "Bangladesh"

CRISIS_OPENING = (
    "I'm really sorry you're going through this. Your safety matters most right now."
)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_team(raw: Optional[Mapping[str, Any]]) -> Optional[EmergencyTeamContact]:
    """Build a contact from loosely shaped team data.

    Accepts `phone`, `contact` or `contactNumber` for the phone number.
    Returns None when name, email or phone is missing.
    """
    if not raw:
        return None

    name = _text(raw.get("name"))
    email = _text(raw.get("email"))
    phone = _text(raw.get("phone") or raw.get("contact") or raw.get("contactNumber"))
    region = _text(raw.get("region"))

    if not name or not email or not phone:
        return None

    return EmergencyTeamContact(
        name=name,
        email=email,
        phone=phone,
        region=region or DEFAULT_TEAM_REGION,
    )


def default_team(config: CrisisConfig = CRISIS_CONFIG) -> Optional[EmergencyTeamContact]:
    """The environment-configured emergency team, if complete."""
    team = normalize_team({
        "name": config.team_name,
        "email": config.team_email,
        "phone": config.team_phone,
        "region": config.team_region,
    })
    if team is None:
        logger.warning("EMERGENCY_TEAM_INCOMPLETE", extra={"region": config.team_region})
    return team


def format_team_contact(team: Optional[EmergencyTeamContact]) -> str:
    """One-line contact, or an empty string when there is no team."""
    if team is None:
        return ""
    details = " | ".join([team.name, team.phone, team.email])
    return f"Emergency team ({team.region or DEFAULT_TEAM_REGION}): {details}"


def build_crisis_response(
    region: Optional[str] = None,
    team: Optional[EmergencyTeamContact] = None,
) -> str:
    """Compose the chatbot reply used for high and critical risk messages."""
    lines = [CRISIS_OPENING, format_resources(resolve(region))]

    team_line = format_team_contact(team)
    if team_line:
        lines.append(team_line)

    return "\n".join(lines)
