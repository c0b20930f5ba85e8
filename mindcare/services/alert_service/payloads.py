"""Adapters from external tracking payloads to the canonical alert draft.

Two request shapes are accepted and must stay supported:

Canonical:
    {"userId", "riskLevel", "isHeavy", "excerpt", "fullText"}

Legacy (older chatbot tracking calls):
    {"userId", "userMessage", "moodLevel", "hasGrowth"}

`userMessage` maps to the full text. `moodLevel` and `hasGrowth` have no
canonical field; they are carried in the draft's metadata untouched.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from mindcare.shared.errors import ValidationError
from mindcare.shared.models import EXCERPT_MAX_LENGTH, RiskLevel

LEGACY_FIELDS = ("userMessage", "moodLevel", "hasGrowth")
LEGACY_METADATA_FIELDS = ("moodLevel", "hasGrowth")

CANONICAL = "canonical"
LEGACY = "legacy"


@dataclass(frozen=True)
class AlertDraft:
    """Normalized alert input, ready to persist."""
    user_id: str
    risk_level: str
    is_heavy: bool
    excerpt: str
    full_text: str
    source_shape: str = CANONICAL
    metadata: Dict[str, Any] = field(default_factory=dict)


def _user_id(value: Any) -> str:
    if isinstance(value, bool) or not value:
        raise ValidationError("Missing userId")
    user_id = str(value).strip()
    if not user_id:
        raise ValidationError("Missing userId")
    return user_id


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _build(
    body: Mapping[str, Any],
    full_text: Optional[str],
    shape: str,
    metadata: Dict[str, Any],
    excerpt_max_length: int,
) -> AlertDraft:
    user_id = _user_id(body.get("userId"))

    resolved_full_text = full_text or ""
    resolved_excerpt = (_text(body.get("excerpt")) or resolved_full_text)[:excerpt_max_length]
    resolved_risk_level = _text(body.get("riskLevel")) or RiskLevel.LOW.value
    resolved_is_heavy = bool(body.get("isHeavy")) or resolved_risk_level != RiskLevel.LOW.value

    return AlertDraft(
        user_id=user_id,
        risk_level=resolved_risk_level,
        is_heavy=resolved_is_heavy,
        excerpt=resolved_excerpt,
        full_text=resolved_full_text,
        source_shape=shape,
        metadata=metadata,
    )


def from_canonical(
    body: Mapping[str, Any],
    excerpt_max_length: int = EXCERPT_MAX_LENGTH,
) -> AlertDraft:
    """Adapt a canonical tracking payload."""
    return _build(body, _text(body.get("fullText")), CANONICAL, {}, excerpt_max_length)


def from_legacy(
    body: Mapping[str, Any],
    excerpt_max_length: int = EXCERPT_MAX_LENGTH,
) -> AlertDraft:
    """Adapt a legacy tracking payload.

    An explicit fullText still wins over userMessage.
    """
    full_text = _text(body.get("fullText")) or _text(body.get("userMessage"))
    metadata = {
        key: body[key] for key in LEGACY_METADATA_FIELDS
        if body.get(key) is not None
    }
    return _build(body, full_text, LEGACY, metadata, excerpt_max_length)


def detect_shape(body: Mapping[str, Any]) -> str:
    """Legacy if any legacy-only field is present, canonical otherwise."""
    if any(body.get(key) is not None for key in LEGACY_FIELDS):
        return LEGACY
    return CANONICAL


def adapt_payload(
    body: Mapping[str, Any],
    excerpt_max_length: int = EXCERPT_MAX_LENGTH,
) -> AlertDraft:
    """Translate any accepted payload shape into an AlertDraft.

    Raises:
        ValidationError: If userId is missing
    """
    if detect_shape(body) == LEGACY:
        return from_legacy(body, excerpt_max_length)
    return from_canonical(body, excerpt_max_length)
