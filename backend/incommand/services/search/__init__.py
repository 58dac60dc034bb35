# Search module - Relevance ranking over incident records
from .semantic import (
    SearchFilters,
    SearchOptions,
    SearchResult,
    SemanticSearch,
    SEMANTIC_GROUPS,
    tokenize,
    search_incidents,
    get_suggestions,
)

__all__ = [
    "SearchFilters",
    "SearchOptions",
    "SearchResult",
    "SemanticSearch",
    "SEMANTIC_GROUPS",
    "tokenize",
    "search_incidents",
    "get_suggestions",
]
