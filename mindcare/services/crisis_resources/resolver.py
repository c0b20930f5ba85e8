"""Region-aware crisis resource lookup and formatting.

Pure functions: no I/O, no errors. Used to render immediate self-help
guidance next to chatbot replies, independently of persistence.
"""
from typing import Dict, List, Optional

from mindcare.shared.models import CrisisResourceSet
from .config import CRISIS_CONFIG

IASP_CRISIS_CENTRES = "https://www.iasp.info/resources/Crisis_Centres/"

CRISIS_RESOURCES: Dict[str, CrisisResourceSet] = {
    "BD": CrisisResourceSet(
        region_name="Bangladesh",
        emergency="999",
        crisis_link=IASP_CRISIS_CENTRES,
        guidance=(
            "If you are in immediate danger, call 999 or go to the nearest hospital emergency department.",
            "If you can, ask a trusted person to stay with you.",
        ),
    ),
}

FALLBACK_RESOURCES = CrisisResourceSet(
    region_name="your area",
    emergency=None,
    crisis_link=IASP_CRISIS_CENTRES,
    guidance=(
        "If you are in immediate danger, call your local emergency number or go to the nearest hospital emergency department.",
        "If you can, ask a trusted person to stay with you.",
    ),
)

GENERIC_EMERGENCY_LINE = (
    "If you are in immediate danger, call your local emergency number "
    "or go to the nearest hospital emergency department."
)


def resolve(region: Optional[str] = None) -> CrisisResourceSet:
    """Resolve the crisis resources for a region code.

    Args:
        region: Case-insensitive region code; None or blank uses the
            configured default region

    Returns:
        The region's resources, or the fallback set (emergency=None)
    """
    code = (region or "").strip().upper() or CRISIS_CONFIG.default_region
    return CRISIS_RESOURCES.get(code, FALLBACK_RESOURCES)


def format_resources(resources: Optional[CrisisResourceSet] = None) -> str:
    """Render resources as a bullet list for user-facing messages.

    Guidance lines mentioning "emergency department" are skipped since
    the first line already says it.
    """
    if resources is None:
        resources = resolve()

    lines: List[str] = []

    if resources.region_name and resources.emergency:
        lines.append(
            f"- If you are in {resources.region_name}, call {resources.emergency} "
            "or go to the nearest hospital emergency department."
        )
    else:
        lines.append(f"- {GENERIC_EMERGENCY_LINE}")

    for line in resources.guidance:
        if line and "emergency department" not in line:
            lines.append(f"- {line}")

    if resources.crisis_link:
        lines.append(f"- More crisis resources: {resources.crisis_link}")

    return "\n".join(lines)
