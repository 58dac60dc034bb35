"""
Contextual modifiers derived from free text.

Quantity signals scale the severe tiers multiplicatively, temporal signals
add a flat boost. Both are pure functions of the text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Unanchored alternations: "now" also fires inside "known" or "snow".
MULTIPLE_PEOPLE_RE = re.compile(r"(multiple|several|many)\s+(people|persons|individuals)", re.IGNORECASE)
HEADCOUNT_RE = re.compile(r"(\d+)\s+(people|persons|injured|affected)", re.IGNORECASE)
ESCALATION_RE = re.compile(r"(escalating|worsening|deteriorating|spreading)", re.IGNORECASE)
IMMEDIATE_RE = re.compile(r"(now|immediately|asap|right now|urgent response)", re.IGNORECASE)
ONGOING_RE = re.compile(r"(ongoing|continuing|in progress|still happening)", re.IGNORECASE)

MULTIPLE_PEOPLE_FACTOR = 1.2
LARGE_HEADCOUNT_FACTOR = 1.3
MODERATE_HEADCOUNT_FACTOR = 1.15
ESCALATION_FACTOR = 1.25

IMMEDIATE_BOOST = 0.2
ONGOING_BOOST = 0.1


@dataclass(frozen=True)
class ContextualModifier:
    """Adjustment applied on top of raw lexicon scores."""
    multiplier: float = 1.0
    additive_boost: float = 0.0
    signals: Tuple[str, ...] = field(default_factory=tuple)


def _first_headcount(text: str) -> Optional[int]:
    m = HEADCOUNT_RE.search(text)
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        return None


def detect_quantity(text: Optional[str]) -> ContextualModifier:
    """
    Detect how many people are involved and whether things are escalating.

    Only the first "<n> people/persons/injured/affected" occurrence is read.
    Counts of 5 or fewer add nothing.
    """
    text = text or ""
    multiplier = 1.0
    signals: List[str] = []

    if MULTIPLE_PEOPLE_RE.search(text):
        multiplier *= MULTIPLE_PEOPLE_FACTOR
        signals.append("multiple people involved")

    count = _first_headcount(text)
    if count is not None:
        if count > 10:
            multiplier *= LARGE_HEADCOUNT_FACTOR
            signals.append(f"{count} people affected")
        elif count > 5:
            multiplier *= MODERATE_HEADCOUNT_FACTOR
            signals.append(f"{count} people involved")

    if ESCALATION_RE.search(text):
        multiplier *= ESCALATION_FACTOR
        signals.append("escalating situation")

    return ContextualModifier(multiplier=multiplier, signals=tuple(signals))


def detect_temporal(text: Optional[str]) -> ContextualModifier:
    """Detect immediacy and ongoing-situation language."""
    text = text or ""
    boost = 0.0
    signals: List[str] = []

    if IMMEDIATE_RE.search(text):
        boost += IMMEDIATE_BOOST
        signals.append("immediate action required")

    if ONGOING_RE.search(text):
        boost += ONGOING_BOOST
        signals.append("ongoing situation")

    return ContextualModifier(additive_boost=boost, signals=tuple(signals))
