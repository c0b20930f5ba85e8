"""Keyword-based risk and mood analysis for chat messages.

Deterministic and fast: runs on every chat message before any reply is
generated. Phrase lists are matched as lowercase substrings.
"""
from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

from mindcare.shared.models import RiskLevel, RiskType

# First match wins, so order matters.
MOOD_KEYWORDS: Tuple[Tuple[str, int], ...] = (
    ("terrible", 1), ("awful", 1), ("horrible", 1), ("depressed", 2),
    ("sad", 3), ("anxious", 3), ("stressed", 3), ("worried", 3), ("overwhelmed", 3),
    ("okay", 5), ("neutral", 5), ("fine", 5),
    ("good", 7), ("happy", 7), ("content", 7),
    ("great", 9), ("excellent", 9), ("amazing", 9), ("wonderful", 9),
)

SUICIDE_PHRASES: FrozenSet[str] = frozenset({
    "suicide",
    "kill myself",
    "end my life",
    "no reason to live",
    "want to die",
    "wish i was dead",
    "take my life",
    "end it all",
})

SELF_HARM_PHRASES: FrozenSet[str] = frozenset({
    "self-harm",
    "self harm",
    "hurt myself",
    "harm myself",
    "cut myself",
    "overdose",
})

# Suicide language plus any of these escalates to critical
PLAN_SIGNALS: FrozenSet[str] = frozenset({
    "plan",
    "planning",
    "means",
    "method",
    "tonight",
    "today",
    "right now",
    "immediate",
})

DESPAIR_PHRASES: FrozenSet[str] = frozenset({"hopeless", "worthless", "despair"})

HEAVY_SIGNALS: FrozenSet[str] = frozenset({
    "panic attack",
    "abuse",
    "violence",
    "assault",
    "i can't cope",
    "i can't go on",
    "domestic violence",
    "sexual assault",
})

SUBSTANCE_SIGNALS: FrozenSet[str] = frozenset({
    "alcohol",
    "drug",
    "substance",
    "addiction",
    "overdose",
})

DEFAULT_MOOD_LEVEL = 5
BASELINE_RISK_SCORE = 2


@dataclass(frozen=True)
class RiskAssessment:
    """Result of analyzing one message."""
    mood_level: int
    risk_level: RiskLevel
    risk_score: int
    risk_type: RiskType
    is_heavy: bool
    matched_phrases: Tuple[str, ...] = ()

    @property
    def requires_escalation(self) -> bool:
        return self.risk_level != RiskLevel.LOW or self.is_heavy

    @property
    def requires_crisis_response(self) -> bool:
        return self.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL)


def _matches(text: str, phrases: FrozenSet[str]) -> List[str]:
    return sorted(p for p in phrases if p in text)


def analyze_message(text: str) -> RiskAssessment:
    """Classify a message's risk level, type, score and mood.

    Args:
        text: Raw message text (never logged)

    Returns:
        RiskAssessment for the message
    """
    lower = (text or "").lower()

    mood_level = DEFAULT_MOOD_LEVEL
    for word, level in MOOD_KEYWORDS:
        if word in lower:
            mood_level = level
            break

    suicide = _matches(lower, SUICIDE_PHRASES)
    self_harm = _matches(lower, SELF_HARM_PHRASES)
    plan = _matches(lower, PLAN_SIGNALS)
    despair = _matches(lower, DESPAIR_PHRASES)
    heavy = _matches(lower, HEAVY_SIGNALS)
    substance = _matches(lower, SUBSTANCE_SIGNALS)

    if suicide and plan:
        risk_level = RiskLevel.CRITICAL
    elif suicide or self_harm:
        risk_level = RiskLevel.HIGH
    elif despair:
        risk_level = RiskLevel.MEDIUM
    else:
        risk_level = RiskLevel.LOW

    is_heavy = bool(heavy) or risk_level != RiskLevel.LOW

    if suicide:
        risk_type = RiskType.SUICIDAL_IDEATION
    elif self_harm:
        risk_type = RiskType.SELF_HARM
    elif substance:
        risk_type = RiskType.SUBSTANCE_ABUSE
    elif is_heavy:
        risk_type = RiskType.CRISIS
    else:
        risk_type = RiskType.OTHER

    if suicide or risk_level == RiskLevel.CRITICAL:
        risk_score = 10
    elif risk_level == RiskLevel.HIGH:
        risk_score = 8
    elif risk_level == RiskLevel.MEDIUM:
        risk_score = 6 if is_heavy else 5
    else:
        risk_score = BASELINE_RISK_SCORE

    matched = tuple(sorted(set(suicide + self_harm + plan + despair + heavy + substance)))

    return RiskAssessment(
        mood_level=mood_level,
        risk_level=risk_level,
        risk_score=risk_score,
        risk_type=risk_type,
        is_heavy=is_heavy,
        matched_phrases=matched,
    )
