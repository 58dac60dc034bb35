"""
Signal scoring for a single priority tier.
Phrases weigh twice as much as keywords; every term is checked on every call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .lexicons import SignalLexicon

PHRASE_POINTS = 0.3
KEYWORD_POINTS = 0.15


@dataclass(frozen=True)
class SignalMatch:
    """Weighted score for one tier plus the terms that produced it."""
    score: float = 0.0
    matched_terms: Tuple[str, ...] = field(default_factory=tuple)


def score_signals(text: Optional[str], lexicon: SignalLexicon) -> SignalMatch:
    """
    Score text against one lexicon using case-insensitive substring containment.

    - each phrase found adds PHRASE_POINTS * weight
    - each keyword found adds KEYWORD_POINTS * weight
    A term listed both as phrase and keyword counts twice.
    """
    lower_text = (text or "").lower()
    if not lower_text:
        return SignalMatch()

    score = 0.0
    matched = []

    for phrase in lexicon.phrases:
        if phrase.lower() in lower_text:
            score += PHRASE_POINTS * lexicon.weight
            matched.append(phrase)

    for keyword in lexicon.keywords:
        if keyword.lower() in lower_text:
            score += KEYWORD_POINTS * lexicon.weight
            matched.append(keyword)

    return SignalMatch(score=score, matched_terms=tuple(matched))
