import uuid
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Sequence
from incommand.core.config import settings
from incommand.core.logging import get_logger
from incommand.services.priority import PriorityClassifier, PriorityMatch, classify_priority
from incommand.services.radio import (
    RadioCategory, RadioMessage, IncidentDetails,
    analyze_radio_message, should_create_incident,
    extract_incident_details, find_duplicate_incident
)

logger = get_logger(__name__)

NOT_ELIGIBLE_REASON = "Message does not meet incident creation criteria"
ALREADY_LINKED_REASON = "Incident already linked to this message"
DUPLICATE_REASON = "Duplicate incident detected - linked to existing incident"


class PipelineTimings:
    """Track timing metrics for pipeline stages."""

    def __init__(self):
        self.start_time = time.time()
        self.analyze_ms: float = 0
        self.dedupe_ms: float = 0
        self.classify_ms: float = 0
        self.total_ms: float = 0

    def log_summary(self, request_id: str):
        self.total_ms = (time.time() - self.start_time) * 1000
        logger.info(
            f"[{request_id}] Radio pipeline completed - "
            f"analyze: {self.analyze_ms:.1f}ms, "
            f"dedupe: {self.dedupe_ms:.1f}ms, "
            f"classify: {self.classify_ms:.1f}ms, "
            f"total: {self.total_ms:.1f}ms"
        )


@dataclass(frozen=True)
class IncidentDraft:
    """Incident ready to be persisted by the incident log."""
    incident_type: str
    occurrence: str
    location: Optional[str]
    radio_priority: str
    priority: PriorityMatch
    radio_message_id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "incident_type": self.incident_type,
            "occurrence": self.occurrence,
            "location": self.location,
            "radio_priority": self.radio_priority,
            "priority": self.priority.to_dict(),
            "radio_message_id": self.radio_message_id,
        }


@dataclass(frozen=True)
class RadioProcessingResult:
    analyzed: bool
    category: Optional[str] = None
    priority: Optional[str] = None
    incident_created: bool = False
    incident_id: Optional[Any] = None
    reason: Optional[str] = None
    draft: Optional[IncidentDraft] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analyzed": self.analyzed,
            "category": self.category,
            "priority": self.priority,
            "incident_created": self.incident_created,
            "incident_id": self.incident_id,
            "reason": self.reason,
            "draft": self.draft.to_dict() if self.draft else None,
        }


def process_radio_message(
    message: RadioMessage,
    recent_incidents: Sequence[Any] = (),
    auto_create: bool = True,
    classifier: Optional[PriorityClassifier] = None,
    now: Optional[datetime] = None,
) -> RadioProcessingResult:
    """
    Radio message pipeline.

    Stages:
    1. Categorise the message (skipped when category and priority are set)
    2. Decide whether it warrants an incident
    3. Check for a duplicate among recent incidents
    4. Extract details and classify the incident priority
    """
    request_id = str(uuid.uuid4())[:8]
    timings = PipelineTimings()

    logger.info(f"[{request_id}] Processing radio message {message.id or '<new>'}")

    # Stage 1: Analyze if not already analyzed
    if not message.category or not message.priority:
        t0 = time.time()
        analysis = analyze_radio_message(message.text)
        timings.analyze_ms = (time.time() - t0) * 1000

        message = replace(
            message,
            category=analysis.category.value,
            priority=analysis.priority.value,
        )
        logger.info(
            f"[{request_id}] Categorised as {message.category}/{message.priority} "
            f"(confidence {analysis.confidence:.2f})")

        create = auto_create and analysis.category in (RadioCategory.EMERGENCY, RadioCategory.INCIDENT)
    else:
        create = auto_create and should_create_incident(message) and not message.incident_id

    if not create:
        timings.log_summary(request_id)
        return RadioProcessingResult(
            analyzed=True,
            category=message.category,
            priority=message.priority,
        )

    result = _create_incident_draft(message, recent_incidents, classifier, now, timings, request_id)
    timings.log_summary(request_id)
    return result


def _create_incident_draft(
    message: RadioMessage,
    recent_incidents: Sequence[Any],
    classifier: Optional[PriorityClassifier],
    now: Optional[datetime],
    timings: PipelineTimings,
    request_id: str,
) -> RadioProcessingResult:
    """Build an incident draft unless the message is ineligible, linked, or a duplicate."""
    base = dict(analyzed=True, category=message.category, priority=message.priority)

    if not should_create_incident(message):
        return RadioProcessingResult(**base, reason=NOT_ELIGIBLE_REASON)

    if message.incident_id:
        return RadioProcessingResult(**base, reason=ALREADY_LINKED_REASON, incident_id=message.incident_id)

    # Stage 3: Duplicate check
    t0 = time.time()
    duplicate_id = find_duplicate_incident(
        message.text,
        recent_incidents,
        window_minutes=settings.duplicate_window_minutes,
        now=now,
    )
    timings.dedupe_ms = (time.time() - t0) * 1000

    if duplicate_id is not None:
        logger.info(f"[{request_id}] Duplicate of incident {duplicate_id}")
        return RadioProcessingResult(**base, reason=DUPLICATE_REASON, incident_id=duplicate_id)

    # Stage 4: Extract details and classify priority
    t0 = time.time()
    details: IncidentDetails = extract_incident_details(message)
    if classifier is not None:
        priority = classifier.classify(details.description, details.type)
    else:
        priority = classify_priority(details.description, details.type)
    timings.classify_ms = (time.time() - t0) * 1000

    logger.info(
        f"[{request_id}] Drafted {details.type} incident at {details.location or 'unknown location'} "
        f"with priority {priority.priority.value} ({priority.confidence:.2f})")

    return RadioProcessingResult(
        **base,
        incident_created=True,
        draft=IncidentDraft(
            incident_type=details.type,
            occurrence=details.description,
            location=details.location,
            radio_priority=details.priority,
            priority=priority,
            radio_message_id=message.id,
        ),
    )
