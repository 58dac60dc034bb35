# Priority module - Rule-based incident priority classification
from .lexicons import (
    PriorityTier,
    TIER_ORDER,
    SignalLexicon,
    LexiconSet,
    DEFAULT_LEXICONS,
    load_lexicons,
    lexicons_from_dict,
)
from .scoring import SignalMatch, score_signals
from .modifiers import ContextualModifier, detect_quantity, detect_temporal
from .arbiter import (
    PriorityMatch,
    PriorityClassifier,
    resolve_type_priority,
    classify_priority,
    detect_priority,
    detect_priority_with_confidence,
)

__all__ = [
    "PriorityTier",
    "TIER_ORDER",
    "SignalLexicon",
    "LexiconSet",
    "DEFAULT_LEXICONS",
    "load_lexicons",
    "lexicons_from_dict",
    "SignalMatch",
    "score_signals",
    "ContextualModifier",
    "detect_quantity",
    "detect_temporal",
    "PriorityMatch",
    "PriorityClassifier",
    "resolve_type_priority",
    "classify_priority",
    "detect_priority",
    "detect_priority_with_confidence",
]
