from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any, Literal, Union
from datetime import datetime, timezone


PriorityLabel = Literal["urgent", "high", "medium", "low"]
RadioCategoryLabel = Literal["emergency", "incident", "routine", "coordination", "other"]
RadioPriorityLabel = Literal["critical", "high", "medium", "low"]


# ============================================================================
# Priority Classification Models
# ============================================================================

class ClassifyRequest(BaseModel):
    """Free-text report plus optional incident type label."""
    text: str = ""
    incident_type: Optional[str] = None


class PriorityMatchResponse(BaseModel):
    """Priority classification result."""
    priority: PriorityLabel
    confidence: float = Field(ge=0.3, le=1.0)
    signals: List[str] = Field(default_factory=list)
    reasoning: str = ""


# ============================================================================
# Incident Search Models
# ============================================================================

class IncidentRecord(BaseModel):
    """Incident log entry as fetched by the caller. Unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    event_id: Optional[str] = None
    occurrence: Optional[str] = None
    action_taken: Optional[str] = None
    incident_type: Optional[str] = None
    priority: Optional[str] = None
    callsign_from: Optional[str] = None
    callsign_to: Optional[str] = None
    logged_by_callsign: Optional[str] = None
    timestamp: Optional[str] = None
    is_closed: bool = False


class SearchFiltersModel(BaseModel):
    """Structural filters applied before ranking."""
    event_id: Optional[str] = None
    incident_type: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[Literal["open", "closed"]] = None
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None


class SearchRequest(BaseModel):
    """Search an in-memory set of incidents."""
    incidents: List[IncidentRecord] = Field(default_factory=list)
    query: str = ""
    filters: Optional[SearchFiltersModel] = None
    limit: Optional[int] = Field(default=None, ge=1, le=500)
    threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class SearchResultResponse(BaseModel):
    """A ranked incident with highlights."""
    incident: Dict[str, Any]
    score: float
    highlights: List[str] = Field(default_factory=list)
    relevance_reason: str


class SuggestionsRequest(BaseModel):
    incidents: List[IncidentRecord] = Field(default_factory=list)
    partial_query: str = ""


# ============================================================================
# Radio Models
# ============================================================================

class RadioMessageModel(BaseModel):
    """A radio transmission from the radio log."""
    id: Optional[Union[int, str]] = None
    message: str = ""
    transcription: Optional[str] = None
    category: Optional[RadioCategoryLabel] = None
    priority: Optional[RadioPriorityLabel] = None
    created_at: Optional[str] = None
    incident_id: Optional[Union[int, str]] = None


class RadioAnalyzeRequest(BaseModel):
    message: str = ""


class RadioAnalysisResponse(BaseModel):
    category: RadioCategoryLabel
    priority: RadioPriorityLabel
    confidence: float


class RadioProcessRequest(BaseModel):
    """Radio message plus the recent incidents used for duplicate detection."""
    message: RadioMessageModel
    recent_incidents: List[IncidentRecord] = Field(default_factory=list)
    auto_create: bool = True


class IncidentDraftResponse(BaseModel):
    incident_type: str
    occurrence: str
    location: Optional[str] = None
    radio_priority: str
    priority: PriorityMatchResponse
    radio_message_id: Optional[Union[int, str]] = None


class RadioProcessResponse(BaseModel):
    analyzed: bool
    category: Optional[str] = None
    priority: Optional[str] = None
    incident_created: bool = False
    incident_id: Optional[Union[int, str]] = None
    reason: Optional[str] = None
    draft: Optional[IncidentDraftResponse] = None


class ChannelHealthRequest(BaseModel):
    messages: List[RadioMessageModel] = Field(default_factory=list)
    time_window_minutes: Optional[int] = Field(default=None, ge=1, le=240)


class ChannelHealthResponse(BaseModel):
    """Overload report and 0-100 health score for a radio channel."""
    is_overloaded: bool
    message_rate: float
    avg_response_time: Optional[float] = None
    high_priority_ratio: float = 0.0
    overload_reason: Optional[str] = None
    health_score: int = Field(ge=0, le=100)


# ============================================================================
# API Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    request_id: Optional[str] = None
