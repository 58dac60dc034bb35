"""
Natural language search over already-fetched incident records.

Relevance is a weighted blend of phrase/word overlap, field matches, recency
and a coarse concept-group similarity, normalized to [0, 1].
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from incommand.core.logging import get_logger
from incommand.services.records import field_value, parse_timestamp, to_utc

logger = get_logger(__name__)

# Points available per signal
EXACT_PHRASE_POINTS = 50
OCCURRENCE_OVERLAP_POINTS = 20
ACTION_OVERLAP_POINTS = 15
INCIDENT_TYPE_POINTS = 10
PRIORITY_POINTS = 5
CALLSIGN_POINTS = 5
RECENCY_POINTS = 5
SEMANTIC_POINTS = 10

RECENCY_WINDOW_DAYS = 30
MAX_HIGHLIGHTS = 3
MAX_SUGGESTIONS = 8

CALLSIGN_FIELDS = ("callsign_from", "callsign_to", "logged_by_callsign")

# Related terms per concept, used as a lightweight stand-in for embeddings
SEMANTIC_GROUPS: Dict[str, List[str]] = {
    "medical": ["health", "injury", "sick", "ambulance", "medic", "first aid", "casualty", "patient"],
    "security": ["threat", "danger", "suspicious", "concern", "alarm", "breach", "unauthorized"],
    "violence": ["fight", "assault", "attack", "aggression", "altercation", "conflict"],
    "emergency": ["urgent", "critical", "immediate", "emergency", "serious", "severe"],
    "crowd": ["crowding", "surge", "crush", "capacity", "overcrowding", "dense"],
    "fire": ["smoke", "flames", "burning", "evacuation", "alarm"],
    "theft": ["stolen", "missing", "robbery", "pickpocket", "shoplifting"],
    "lost": ["missing", "lost", "separated", "wandering", "unaccompanied"],
}

NON_WORD_RE = re.compile(r"[^\w\s]")
WHITESPACE_RE = re.compile(r"\s+")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

EMPTY_QUERY_REASON = "No search query - showing all filtered results"


@dataclass
class SearchFilters:
    """Structural filters, AND-combined. None means 'do not filter'."""
    event_id: Optional[str] = None
    incident_type: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None  # "open" | "closed"
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None


@dataclass
class SearchOptions:
    query: str = ""
    filters: Optional[SearchFilters] = None
    limit: int = 20
    threshold: float = 0.3


@dataclass
class SearchResult:
    incident: Any
    score: float
    highlights: List[str] = field(default_factory=list)
    relevance_reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "incident": self.incident,
            "score": self.score,
            "highlights": list(self.highlights),
            "relevance_reason": self.relevance_reason,
        }


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase, strip punctuation, split on whitespace, drop tokens of 2 chars or fewer."""
    cleaned = NON_WORD_RE.sub(" ", (text or "").lower())
    return [word for word in WHITESPACE_RE.split(cleaned) if len(word) > 2]


def _text(incident: Any, name: str) -> str:
    value = field_value(incident, name)
    return str(value) if value is not None else ""


def _overlap_ratio(query_words: Sequence[str], field_words: Sequence[str]) -> float:
    if not query_words:
        return 0.0
    field_set = set(field_words)
    matches = sum(1 for word in query_words if word in field_set)
    return matches / max(1, len(query_words))


class SemanticSearch:
    """Scores and ranks incident records against a free-text query."""

    def __init__(self, now: Optional[datetime] = None):
        # Fixed clock for deterministic scoring; defaults to wall time per call
        self._now = to_utc(now) if now else None

    def _current_time(self) -> datetime:
        return self._now or datetime.now(timezone.utc)

    def search(self, incidents: Sequence[Any], options: SearchOptions) -> List[SearchResult]:
        """Filter, score, threshold, sort and truncate."""
        query = options.query or ""
        limit = max(0, int(options.limit))
        filtered = self.apply_filters(incidents, options.filters)

        if not query.strip():
            return [
                SearchResult(incident=inc, score=1.0, highlights=[], relevance_reason=EMPTY_QUERY_REASON)
                for inc in filtered[:limit]
            ]

        now = self._current_time()
        scored: List[SearchResult] = []
        for incident in filtered:
            score = self.calculate_relevance_score(incident, query, now)
            scored.append(SearchResult(
                incident=incident,
                score=score,
                highlights=self.extract_highlights(incident, query),
                relevance_reason=self.generate_relevance_reason(incident, query, score, now),
            ))

        # Stable sort keeps corpus order for equal scores
        results = [r for r in scored if r.score >= options.threshold]
        results.sort(key=lambda r: r.score, reverse=True)

        logger.debug(
            f"Search '{query[:40]}' matched {len(results)} of {len(filtered)} filtered incidents")
        return results[:limit]

    def calculate_relevance_score(self, incident: Any, query: str, now: Optional[datetime] = None) -> float:
        """
        Weighted relevance normalized by the points available for this record:
        - exact phrase in occurrence (50)
        - word overlap in occurrence (20) and action taken (15)
        - incident type (10), priority (5), callsign (5)
        - recency, linear decay over 30 days (5)
        - concept-group similarity for queries of 3+ words (10)
        """
        now = now or self._current_time()
        query_lower = query.lower()
        query_words = tokenize(query_lower)
        score = 0.0
        max_score = 0.0

        occurrence = _text(incident, "occurrence").lower()
        if occurrence and query_lower in occurrence:
            score += EXACT_PHRASE_POINTS
        max_score += EXACT_PHRASE_POINTS

        score += _overlap_ratio(query_words, tokenize(occurrence)) * OCCURRENCE_OVERLAP_POINTS
        max_score += OCCURRENCE_OVERLAP_POINTS

        action_taken = _text(incident, "action_taken").lower()
        score += _overlap_ratio(query_words, tokenize(action_taken)) * ACTION_OVERLAP_POINTS
        max_score += ACTION_OVERLAP_POINTS

        incident_type = _text(incident, "incident_type").lower()
        if incident_type and query_lower in incident_type:
            score += INCIDENT_TYPE_POINTS
        max_score += INCIDENT_TYPE_POINTS

        priority = _text(incident, "priority").lower()
        if priority and priority in query_words:
            score += PRIORITY_POINTS
        max_score += PRIORITY_POINTS

        if self._callsign_matches(incident, query_lower):
            score += CALLSIGN_POINTS
        max_score += CALLSIGN_POINTS

        score += self._recency_points(incident, now)
        max_score += RECENCY_POINTS

        if len(query_words) > 2:
            score += self.calculate_semantic_similarity(incident, query_words) * SEMANTIC_POINTS
            max_score += SEMANTIC_POINTS

        return score / max_score if max_score > 0 else 0.0

    def calculate_semantic_similarity(self, incident: Any, query_words: Sequence[str]) -> float:
        """Fraction of concept groups shared by the query and the incident text."""
        incident_text = " ".join(
            _text(incident, name) for name in ("occurrence", "action_taken", "incident_type")
        ).lower()

        matched_groups = 0
        for category, related_words in SEMANTIC_GROUPS.items():
            query_has_category = any(word in related_words or word == category for word in query_words)
            incident_has_category = any(word in incident_text for word in related_words)
            if query_has_category and incident_has_category:
                matched_groups += 1

        return min(1.0, matched_groups / len(SEMANTIC_GROUPS))

    def extract_highlights(self, incident: Any, query: str) -> List[str]:
        """Up to three sentences mentioning the query, occurrence first."""
        highlights: List[str] = []
        query_lower = query.lower()
        query_words = tokenize(query_lower)

        def collect(text: str) -> None:
            for sentence in SENTENCE_SPLIT_RE.split(text):
                sentence_lower = sentence.lower()
                if query_lower in sentence_lower or any(word in sentence_lower for word in query_words):
                    highlights.append(sentence.strip())
                    if len(highlights) >= MAX_HIGHLIGHTS:
                        break

        occurrence = _text(incident, "occurrence")
        if occurrence:
            collect(occurrence)

        # Only fall back to the action taken when the occurrence was thin
        action_taken = _text(incident, "action_taken")
        if len(highlights) < 2 and action_taken:
            collect(action_taken)

        return highlights[:MAX_HIGHLIGHTS]

    def generate_relevance_reason(
        self,
        incident: Any,
        query: str,
        score: float,
        now: Optional[datetime] = None,
    ) -> str:
        now = now or self._current_time()
        reasons: List[str] = []
        query_lower = query.lower()

        if query_lower in _text(incident, "occurrence").lower():
            reasons.append("exact phrase match in occurrence")

        if query_lower in _text(incident, "incident_type").lower():
            reasons.append("matches incident type")

        if _text(incident, "priority").lower() == query_lower:
            reasons.append("matches priority level")

        if self._callsign_matches(incident, query_lower):
            reasons.append("matches callsign")

        if score > 0.7:
            reasons.append("highly relevant")
        elif score > 0.5:
            reasons.append("moderately relevant")

        age_days = self._age_days(incident, now)
        if age_days is not None and age_days < 1:
            reasons.append("recent incident")

        return ", ".join(reasons) if reasons else "partial match"

    def apply_filters(self, incidents: Sequence[Any], filters: Optional[SearchFilters]) -> List[Any]:
        if not filters:
            return list(incidents)

        start = to_utc(filters.date_start) if filters.date_start else None
        end = to_utc(filters.date_end) if filters.date_end else None

        kept = []
        for incident in incidents:
            if filters.event_id and field_value(incident, "event_id") != filters.event_id:
                continue
            if filters.incident_type and field_value(incident, "incident_type") != filters.incident_type:
                continue
            if filters.priority and field_value(incident, "priority") != filters.priority:
                continue
            is_closed = bool(field_value(incident, "is_closed"))
            if filters.status == "open" and is_closed:
                continue
            if filters.status == "closed" and not is_closed:
                continue
            if start or end:
                ts = parse_timestamp(field_value(incident, "timestamp"))
                if ts is None:
                    continue
                if (start and ts < start) or (end and ts > end):
                    continue
            kept.append(incident)
        return kept

    def get_suggestions(self, incidents: Sequence[Any], partial_query: str) -> List[str]:
        """Autocomplete from incident types, priorities and occurrence words."""
        partial = (partial_query or "").lower()
        suggestions: Dict[str, None] = {}

        for incident in incidents:
            incident_type = _text(incident, "incident_type")
            if incident_type and incident_type.lower().startswith(partial):
                suggestions.setdefault(incident_type)

            priority = _text(incident, "priority")
            if priority and priority.lower().startswith(partial):
                suggestions.setdefault(f"{priority} priority")

            for word in tokenize(_text(incident, "occurrence")):
                if len(word) > 3 and word.startswith(partial):
                    suggestions.setdefault(word)

        return list(suggestions)[:MAX_SUGGESTIONS]

    def _callsign_matches(self, incident: Any, query_lower: str) -> bool:
        for name in CALLSIGN_FIELDS:
            callsign = _text(incident, name)
            if callsign and query_lower in callsign.lower():
                return True
        return False

    def _age_days(self, incident: Any, now: datetime) -> Optional[float]:
        ts = parse_timestamp(field_value(incident, "timestamp"))
        if ts is None:
            return None
        return max(0.0, (now - ts).total_seconds() / 86400)

    def _recency_points(self, incident: Any, now: datetime) -> float:
        age_days = self._age_days(incident, now)
        if age_days is None:
            return 0.0
        return max(0.0, RECENCY_POINTS * (1 - age_days / RECENCY_WINDOW_DAYS))


semantic_search = SemanticSearch()


def search_incidents(corpus: Sequence[Any], options: SearchOptions) -> List[SearchResult]:
    """Rank incident records against a query with the shared engine."""
    return semantic_search.search(corpus, options)


def get_suggestions(corpus: Sequence[Any], partial_query: str) -> List[str]:
    return semantic_search.get_suggestions(corpus, partial_query)
