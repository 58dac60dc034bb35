"""
Signal lexicons for priority classification.
Each tier carries keywords, phrases, incident type labels and a weight.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Mapping, Tuple


class PriorityTier(str, Enum):
    """Priority tiers for logged incidents, most severe first."""
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Declaration order is the tie-break order everywhere: first listed wins.
TIER_ORDER: Tuple[PriorityTier, ...] = (
    PriorityTier.URGENT,
    PriorityTier.HIGH,
    PriorityTier.MEDIUM,
    PriorityTier.LOW,
)


@dataclass(frozen=True)
class SignalLexicon:
    """Terms and weight associated with one priority tier."""
    tier: PriorityTier
    keywords: Tuple[str, ...]
    phrases: Tuple[str, ...]
    incident_types: Tuple[str, ...]
    weight: float

    def __post_init__(self) -> None:
        if not 0.0 < self.weight <= 1.0:
            raise ValueError(
                f"Lexicon weight for {self.tier.value} must be in (0, 1], got {self.weight}")
        # Accept any iterable of strings but store tuples
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "phrases", tuple(self.phrases))
        object.__setattr__(self, "incident_types", tuple(self.incident_types))


class LexiconSet:
    """Immutable tier -> lexicon table, iterated in TIER_ORDER."""

    __slots__ = ("_lexicons",)

    def __init__(self, lexicons: Iterable[SignalLexicon]):
        by_tier: Dict[PriorityTier, SignalLexicon] = {}
        for lexicon in lexicons:
            if lexicon.tier in by_tier:
                raise ValueError(f"Duplicate lexicon for tier {lexicon.tier.value}")
            by_tier[lexicon.tier] = lexicon

        missing = [t.value for t in TIER_ORDER if t not in by_tier]
        if missing:
            raise ValueError(f"Missing lexicons for tiers: {', '.join(missing)}")

        self._lexicons = tuple(by_tier[t] for t in TIER_ORDER)

    def __getitem__(self, tier: PriorityTier) -> SignalLexicon:
        return self._lexicons[TIER_ORDER.index(PriorityTier(tier))]

    def __iter__(self) -> Iterator[SignalLexicon]:
        return iter(self._lexicons)

    def __len__(self) -> int:
        return len(self._lexicons)

    def __repr__(self) -> str:
        sizes = ", ".join(
            f"{lx.tier.value}={len(lx.keywords) + len(lx.phrases)}" for lx in self._lexicons)
        return f"LexiconSet({sizes})"


URGENT_SIGNALS = SignalLexicon(
    tier=PriorityTier.URGENT,
    keywords=(
        "urgent", "critical", "emergency", "immediate", "life threatening",
        "serious injury", "unconscious", "not breathing", "cardiac", "collapse",
        "bomb", "terror", "weapon", "gun", "knife", "shooting", "stabbing",
        "fire", "flames", "evacuation", "evacuate", "show stop",
    ),
    phrases=(
        "life threatening", "critical condition", "immediate response required",
        "emergency response", "urgent assistance", "code red", "serious injury",
        "suspected weapon", "armed person", "fire outbreak", "evacuation required",
    ),
    incident_types=(
        "Counter-Terror Alert", "Fire", "Emergency Show Stop", "Evacuation",
        "Sexual Misconduct", "Weapon Related",
    ),
    weight=1.0,
)

HIGH_SIGNALS = SignalLexicon(
    tier=PriorityTier.HIGH,
    keywords=(
        "high priority", "serious", "major", "significant", "security",
        "medical", "injury", "injured", "fight", "hostile", "aggressive",
        "breach", "surge", "crush", "missing child", "assault", "attack",
    ),
    phrases=(
        "medical attention", "security response", "high priority", "major incident",
        "crowd surge", "hostile behavior", "missing child", "serious concern",
        "gate breach", "significant damage",
    ),
    incident_types=(
        "Medical", "Fight", "Hostile Act", "Fire Alarm", "Suspected Fire",
        "Missing Child/Person", "Entry Breach", "Crowd Management",
    ),
    weight=0.9,
)

MEDIUM_SIGNALS = SignalLexicon(
    tier=PriorityTier.MEDIUM,
    keywords=(
        "moderate", "attention needed", "issue", "problem", "concern",
        "assistance", "support", "help", "drunk", "intoxicated", "theft",
        "complaint", "welfare", "suspicious",
    ),
    phrases=(
        "requires attention", "assistance needed", "welfare concern",
        "moderate priority", "standard response", "routine incident",
    ),
    incident_types=(
        "Ejection", "Refusal", "Theft", "Suspicious Behaviour", "Welfare",
        "Alcohol / Drug Related", "Environmental", "Tech Issue", "Site Issue",
        "Staffing", "Accessibility",
    ),
    weight=0.7,
)

LOW_SIGNALS = SignalLexicon(
    tier=PriorityTier.LOW,
    keywords=(
        "low priority", "minor", "routine", "information", "update",
        "lost property", "found", "timing", "attendance", "noise",
    ),
    phrases=(
        "low priority", "routine update", "information only", "minor issue",
        "non-urgent", "standard procedure",
    ),
    incident_types=(
        "Lost Property", "Artist On Stage", "Artist Off Stage", "Event Timing",
        "Timings", "Sit Rep", "Attendance", "Noise Complaint", "Accreditation",
        "Animal Incident",
    ),
    weight=0.5,
)

DEFAULT_LEXICONS = LexiconSet([URGENT_SIGNALS, HIGH_SIGNALS, MEDIUM_SIGNALS, LOW_SIGNALS])


def lexicons_from_dict(data: Mapping[str, Any]) -> LexiconSet:
    """
    Build a LexiconSet from a plain mapping keyed by tier name.

    Expected shape per tier:
        {"keywords": [...], "phrases": [...], "incident_types": [...], "weight": 0.9}
    """
    lexicons = []
    for tier in TIER_ORDER:
        entry = data.get(tier.value)
        if entry is None:
            raise ValueError(f"Lexicon config missing tier '{tier.value}'")
        try:
            weight = float(entry["weight"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Lexicon '{tier.value}' has no valid weight") from e

        lexicons.append(SignalLexicon(
            tier=tier,
            keywords=tuple(str(k) for k in entry.get("keywords", [])),
            phrases=tuple(str(p) for p in entry.get("phrases", [])),
            incident_types=tuple(str(t) for t in entry.get("incident_types", [])),
            weight=weight,
        ))
    return LexiconSet(lexicons)


def load_lexicons(path: str) -> LexiconSet:
    """Load lexicons from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid lexicon file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Lexicon file {path} must contain a JSON object")
    return lexicons_from_dict(data)
