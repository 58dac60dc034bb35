"""
Priority arbitration for free-text incident reports.

Combines per-tier signal scores, contextual modifiers and the incident type
label into a single priority with a confidence value and a reasoning trace.
The classifier is deterministic and never raises on input.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from incommand.core.logging import get_logger
from .lexicons import DEFAULT_LEXICONS, TIER_ORDER, LexiconSet, PriorityTier
from .modifiers import detect_quantity, detect_temporal
from .scoring import score_signals

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 1.0

# Fixed boost added to the tier an incident type label belongs to
TYPE_BOOST: Dict[PriorityTier, float] = {
    PriorityTier.URGENT: 0.4,
    PriorityTier.HIGH: 0.3,
    PriorityTier.MEDIUM: 0.2,
    PriorityTier.LOW: 0.2,
}

# Share of the temporal boost each tier receives; medium/low are never modified
TEMPORAL_SHARE: Dict[PriorityTier, float] = {
    PriorityTier.URGENT: 1.0,
    PriorityTier.HIGH: 0.5,
}

CLEAR_WIN_RATIO = 1.5
CLEAR_WIN_BONUS = 1.1
AMBIGUOUS_PENALTY = 0.8

DEFAULT_SIGNAL = "default priority (no context)"
DEFAULT_REASONING = "default priority: No text or incident type provided, defaulting to medium"


@dataclass(frozen=True)
class PriorityMatch:
    """Classification result handed back to the caller."""
    priority: PriorityTier
    confidence: float
    signals: Tuple[str, ...] = field(default_factory=tuple)
    reasoning: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.priority.value,
            "confidence": self.confidence,
            "signals": list(self.signals),
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class _TierScore:
    tier: PriorityTier
    score: float
    matched_terms: Tuple[str, ...]


def _dedupe(items: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeats, keeping first-occurrence order."""
    return tuple(dict.fromkeys(items))


def resolve_type_priority(
    incident_type: Optional[str],
    lexicons: LexiconSet = DEFAULT_LEXICONS,
) -> Optional[PriorityTier]:
    """
    Map an incident type label to a tier by exact, case-sensitive membership.
    Tiers are checked urgent -> low, so the most severe listing wins.
    """
    if not incident_type:
        return None
    for lexicon in lexicons:
        if incident_type in lexicon.incident_types:
            return lexicon.tier
    return None


class PriorityClassifier:
    """Rule-based priority classifier over an injected lexicon set."""

    def __init__(self, lexicons: LexiconSet = DEFAULT_LEXICONS):
        self.lexicons = lexicons

    def classify(self, text: Optional[str], incident_type: Optional[str] = None) -> PriorityMatch:
        """
        Classify a report into a priority tier.

        Steps:
        1. No text and no type -> medium at minimum confidence
        2. Score every tier against the text
        3. Amplify urgent/high with quantity and temporal modifiers
        4. Boost the tier the incident type belongs to
        5. Rank (ties resolve in tier order) and derive confidence
        """
        text = text or ""
        if not text and not incident_type:
            return PriorityMatch(
                priority=PriorityTier.MEDIUM,
                confidence=MIN_CONFIDENCE,
                signals=(DEFAULT_SIGNAL,),
                reasoning=DEFAULT_REASONING,
            )

        reasoning: List[str] = []
        matches = {lexicon.tier: score_signals(text, lexicon) for lexicon in self.lexicons}

        quantity = detect_quantity(text)
        temporal = detect_temporal(text)

        scores: Dict[PriorityTier, float] = {}
        for tier in TIER_ORDER:
            score = matches[tier].score
            if tier in TEMPORAL_SHARE:
                score = score * quantity.multiplier + temporal.additive_boost * TEMPORAL_SHARE[tier]
            scores[tier] = score

        type_tier = resolve_type_priority(incident_type, self.lexicons)
        if type_tier is not None:
            scores[type_tier] += TYPE_BOOST[type_tier]
            reasoning.append(f'incident type "{incident_type}" suggests {type_tier.value} priority')

        # sorted() is stable, so equal scores keep TIER_ORDER
        ranked = sorted(
            (_TierScore(tier, scores[tier], matches[tier].matched_terms) for tier in TIER_ORDER),
            key=lambda s: s.score,
            reverse=True,
        )
        winner, runner_up = ranked[0], ranked[1]

        confidence = winner.score
        if winner.score > runner_up.score * CLEAR_WIN_RATIO:
            confidence = min(confidence * CLEAR_WIN_BONUS, MAX_CONFIDENCE)
            reasoning.append("clear priority indicators")
        elif winner.score > runner_up.score:
            reasoning.append("moderate priority confidence")
        else:
            reasoning.append("ambiguous signals, using best match")
            confidence *= AMBIGUOUS_PENALTY

        confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))

        if quantity.signals:
            reasoning.append(", ".join(quantity.signals))
        if temporal.signals:
            reasoning.append(", ".join(temporal.signals))

        signals = _dedupe(quantity.signals + temporal.signals + winner.matched_terms)

        logger.debug(
            f"Classified as {winner.tier.value} "
            f"(score={winner.score:.3f}, runner_up={runner_up.tier.value}:{runner_up.score:.3f})"
        )

        return PriorityMatch(
            priority=winner.tier,
            confidence=confidence,
            signals=signals,
            reasoning="; ".join(reasoning),
        )

    def detect_priority(self, text: Optional[str], incident_type: Optional[str] = None) -> PriorityTier:
        """Return only the winning tier."""
        return self.classify(text, incident_type).priority

    def detect_priority_with_confidence(
        self,
        text: Optional[str],
        incident_type: Optional[str] = None,
    ) -> Tuple[PriorityTier, float]:
        """Return the winning tier and its confidence."""
        result = self.classify(text, incident_type)
        return result.priority, result.confidence


default_classifier = PriorityClassifier()


def classify_priority(text: Optional[str], incident_type: Optional[str] = None) -> PriorityMatch:
    """Classify with the default lexicons."""
    return default_classifier.classify(text, incident_type)


def detect_priority(text: Optional[str], incident_type: Optional[str] = None) -> PriorityTier:
    return default_classifier.detect_priority(text, incident_type)


def detect_priority_with_confidence(
    text: Optional[str],
    incident_type: Optional[str] = None,
) -> Tuple[PriorityTier, float]:
    return default_classifier.detect_priority_with_confidence(text, incident_type)
