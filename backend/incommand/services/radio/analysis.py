"""
Radio traffic analysis: message categorisation, incident extraction and
channel load monitoring. Keyword matching is case-insensitive substring
containment over the message text.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Union

from incommand.core.logging import get_logger
from incommand.services.records import parse_timestamp

logger = get_logger(__name__)


class RadioCategory(str, Enum):
    EMERGENCY = "emergency"
    INCIDENT = "incident"
    ROUTINE = "routine"
    COORDINATION = "coordination"
    OTHER = "other"


class RadioPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


EMERGENCY_KEYWORDS = (
    "emergency", "urgent", "critical", "immediate", "asap", "as soon as possible",
    "medical", "ambulance", "injury", "accident", "unconscious", "bleeding",
    "fire", "smoke", "evacuate", "evacuation",
    "fight", "violence", "assault", "weapon", "knife", "gun",
    "bomb", "threat", "suspicious", "package",
    "overdose", "drug", "alcohol",
)

# Matches are counted per entry, so "breach" scores twice
INCIDENT_KEYWORDS = (
    "incident", "disturbance", "disorder", "breach", "violation",
    "ejection", "refusal", "arrest", "detained",
    "lost", "found", "missing", "separated",
    "crowd", "surge", "stampede", "crush",
    "barrier", "fence", "breach", "broken",
)

ROUTINE_KEYWORDS = (
    "routine", "normal", "standard", "regular",
    "update", "status", "check", "confirm",
    "copy", "received", "understood", "roger",
)

COORDINATION_WORDS = ("coordinate", "meet", "location", "position")
URGENCY_WORDS = ("now", "immediately", "urgent", "asap")

# (incident type, trigger words), first match wins
INCIDENT_TYPE_RULES = (
    ("Medical", ("medical", "ambulance", "injury", "unconscious")),
    ("Disorder", ("fight", "violence", "assault")),
    ("Fire", ("fire", "smoke")),
    ("Lost/Found", ("lost", "missing", "separated")),
    ("Crowd Management", ("crowd", "surge", "crush")),
    ("Ejection/Refusal", ("ejection", "refusal")),
)

LOCATION_RE = re.compile(r"(?:at|location|position|zone|stand|gate|area)\s+([A-Z0-9\s]+)", re.IGNORECASE)

# Channel load thresholds
HIGH_MESSAGE_RATE = 10.0  # messages per minute
LOW_RESPONSE_GAP = 5.0  # seconds between consecutive messages
HIGH_PRIORITY_SHARE = 0.5
MIN_MESSAGES_FOR_SHARE = 5


@dataclass
class RadioMessage:
    """A logged radio transmission as handed over by the radio log."""
    message: str = ""
    id: Optional[Union[int, str]] = None
    transcription: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None
    incident_id: Optional[Union[int, str]] = None

    @property
    def text(self) -> str:
        return self.message or self.transcription or ""


@dataclass(frozen=True)
class RadioAnalysis:
    category: RadioCategory
    priority: RadioPriority
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "priority": self.priority.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class IncidentDetails:
    type: str
    description: str
    priority: str
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OverloadReport:
    is_overloaded: bool
    message_rate: float
    avg_response_time: Optional[float]
    high_priority_ratio: float = 0.0
    overload_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _count_matches(text: str, keywords: Sequence[str]) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def _contains_any(text: str, words: Sequence[str]) -> bool:
    return any(word in text for word in words)


def analyze_radio_message(message: Optional[str]) -> RadioAnalysis:
    """
    Categorise a radio message and assign a radio priority.

    Emergency keywords win over incident keywords, which win over routine
    ones. Urgency words then lift the priority one step, twice in a row,
    so a low message ends up high.
    """
    lower = (message or "").lower()

    emergency_matches = _count_matches(lower, EMERGENCY_KEYWORDS)
    incident_matches = _count_matches(lower, INCIDENT_KEYWORDS)
    routine_matches = _count_matches(lower, ROUTINE_KEYWORDS)

    category = RadioCategory.OTHER
    priority = RadioPriority.MEDIUM
    confidence = 0.5

    if emergency_matches > 0:
        category = RadioCategory.EMERGENCY
        priority = RadioPriority.CRITICAL if emergency_matches >= 2 else RadioPriority.HIGH
        confidence = min(0.9, 0.5 + emergency_matches * 0.1)
    elif incident_matches > 0:
        category = RadioCategory.INCIDENT
        priority = RadioPriority.HIGH if incident_matches >= 2 else RadioPriority.MEDIUM
        confidence = min(0.85, 0.5 + incident_matches * 0.1)
    elif routine_matches > 0:
        category = RadioCategory.ROUTINE
        priority = RadioPriority.LOW
        confidence = min(0.8, 0.5 + routine_matches * 0.1)
    elif _contains_any(lower, COORDINATION_WORDS):
        category = RadioCategory.COORDINATION
        priority = RadioPriority.MEDIUM
        confidence = 0.6

    if _contains_any(lower, URGENCY_WORDS):
        if priority == RadioPriority.LOW:
            priority = RadioPriority.MEDIUM
        if priority == RadioPriority.MEDIUM:
            priority = RadioPriority.HIGH

    return RadioAnalysis(category=category, priority=priority, confidence=confidence)


def should_create_incident(message: RadioMessage) -> bool:
    """Decide whether a radio message warrants an incident log entry."""
    if message.category in (RadioCategory.EMERGENCY.value, RadioCategory.INCIDENT.value):
        return True
    if message.priority in (RadioPriority.CRITICAL.value, RadioPriority.HIGH.value):
        return True
    return _contains_any(message.text.lower(), INCIDENT_KEYWORDS)


def detect_incident_type(text: str) -> str:
    lower = text.lower()
    for incident_type, words in INCIDENT_TYPE_RULES:
        if _contains_any(lower, words):
            return incident_type
    return "Other"


def extract_incident_details(message: RadioMessage) -> IncidentDetails:
    """Pull incident type, location and priority out of a radio message."""
    text = message.text
    analysis = analyze_radio_message(text)

    location_match = LOCATION_RE.search(text)
    location = location_match.group(1).strip() if location_match else None

    return IncidentDetails(
        type=detect_incident_type(text),
        description=text,
        priority=analysis.priority.value,
        location=location or None,
    )


def detect_overload_pattern(
    messages: Sequence[RadioMessage],
    time_window_minutes: int = 5,
    now: Optional[datetime] = None,
) -> OverloadReport:
    """
    Look for overload in recent channel traffic.

    Overloaded when the message rate exceeds 10/min, when consecutive
    messages arrive less than 5s apart on average, or when more than half
    of at least 5 recent messages are high/critical. The last rule that
    fires supplies the reason.
    """
    if not messages or time_window_minutes <= 0:
        return OverloadReport(is_overloaded=False, message_rate=0.0, avg_response_time=None)

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    window_seconds = time_window_minutes * 60

    recent = []
    for msg in messages:
        created = parse_timestamp(msg.created_at)
        if created is not None and (now - created).total_seconds() <= window_seconds:
            recent.append((created, msg))
    recent.sort(key=lambda pair: pair[0])

    message_rate = len(recent) / time_window_minutes

    avg_response_time: Optional[float] = None
    if len(recent) > 1:
        gaps = [
            (recent[i][0] - recent[i - 1][0]).total_seconds()
            for i in range(1, len(recent))
        ]
        avg_response_time = sum(gaps) / len(gaps)

    is_overloaded = False
    reason: Optional[str] = None

    if message_rate > HIGH_MESSAGE_RATE:
        is_overloaded = True
        reason = f"High message rate: {message_rate:.1f} messages/min"
    elif avg_response_time is not None and avg_response_time < LOW_RESPONSE_GAP:
        is_overloaded = True
        reason = f"Low response time: {avg_response_time:.1f}s average"

    high_count = sum(
        1 for _, msg in recent
        if msg.priority in (RadioPriority.HIGH.value, RadioPriority.CRITICAL.value)
    )
    high_ratio = high_count / len(recent) if recent else 0.0

    if high_ratio > HIGH_PRIORITY_SHARE and len(recent) >= MIN_MESSAGES_FOR_SHARE:
        is_overloaded = True
        reason = f"High concentration of priority messages: {high_ratio * 100:.0f}%"

    if is_overloaded:
        logger.info(f"Radio channel overload detected: {reason}")

    return OverloadReport(
        is_overloaded=is_overloaded,
        message_rate=message_rate,
        avg_response_time=avg_response_time,
        high_priority_ratio=high_ratio,
        overload_reason=reason,
    )


def calculate_channel_health_score(
    message_rate: float,
    avg_response_time: Optional[float],
    overload_indicator: bool,
    high_priority_ratio: float,
) -> int:
    """Channel health from 0 (saturated) to 100 (quiet)."""
    score = 100.0

    if message_rate > 10:
        score -= min(30, (message_rate - 10) * 2)
    elif message_rate > 5:
        score -= (message_rate - 5) * 2

    if avg_response_time is not None and avg_response_time < 5:
        score -= min(20, (5 - avg_response_time) * 4)

    if overload_indicator:
        score -= 25

    if high_priority_ratio > 0.5:
        score -= min(20, (high_priority_ratio - 0.5) * 40)

    # Round half up
    return max(0, min(100, math.floor(score + 0.5)))
