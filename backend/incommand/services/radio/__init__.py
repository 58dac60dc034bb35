# Radio module - Radio traffic analysis and incident extraction
from .analysis import (
    RadioCategory,
    RadioPriority,
    RadioMessage,
    RadioAnalysis,
    IncidentDetails,
    OverloadReport,
    analyze_radio_message,
    should_create_incident,
    detect_incident_type,
    extract_incident_details,
    detect_overload_pattern,
    calculate_channel_health_score,
)
from .dedupe import find_duplicate_incident

__all__ = [
    "RadioCategory",
    "RadioPriority",
    "RadioMessage",
    "RadioAnalysis",
    "IncidentDetails",
    "OverloadReport",
    "analyze_radio_message",
    "should_create_incident",
    "detect_incident_type",
    "extract_incident_details",
    "detect_overload_pattern",
    "calculate_channel_health_score",
    "find_duplicate_incident",
]
