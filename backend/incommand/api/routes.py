from fastapi import APIRouter, HTTPException, Request
from typing import List
from incommand.models.schemas import (
    ClassifyRequest, PriorityMatchResponse,
    SearchRequest, SearchResultResponse, SuggestionsRequest,
    RadioAnalyzeRequest, RadioAnalysisResponse,
    RadioProcessRequest, RadioProcessResponse,
    ChannelHealthRequest, ChannelHealthResponse,
    RadioMessageModel, HealthResponse, ErrorResponse
)
from incommand.core.config import settings
from incommand.core.logging import get_logger
from incommand.services.orchestrator import process_radio_message
from incommand.services.priority import PriorityClassifier
from incommand.services.priority.arbiter import default_classifier
from incommand.services.radio import (
    RadioMessage, analyze_radio_message,
    detect_overload_pattern, calculate_channel_health_score
)
from incommand.services.search import SearchFilters, SearchOptions, search_incidents, get_suggestions

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _classifier(request: Request) -> PriorityClassifier:
    """Classifier configured at startup, or the built-in one."""
    return getattr(request.app.state, "classifier", None) or default_classifier


def _to_radio_message(model: RadioMessageModel) -> RadioMessage:
    return RadioMessage(
        id=model.id,
        message=model.message,
        transcription=model.transcription,
        category=model.category,
        priority=model.priority,
        created_at=model.created_at,
        incident_id=model.incident_id,
    )


@router.post(
    "/priority/classify",
    response_model=PriorityMatchResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Classification error"}
    }
)
async def classify(body: ClassifyRequest, request: Request):
    """
    Classify a free-text report into urgent/high/medium/low.

    Always returns a classification; empty input defaults to medium.
    """
    try:
        result = _classifier(request).classify(body.text, body.incident_type)
        return PriorityMatchResponse(**result.to_dict())
    except Exception as e:
        logger.error(f"Classification failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Classification failed: {str(e)}")


@router.post(
    "/incidents/search",
    response_model=List[SearchResultResponse],
    responses={
        500: {"model": ErrorResponse, "description": "Search error"}
    }
)
async def search(body: SearchRequest):
    """
    Rank the supplied incidents against a natural language query.

    Filters are applied first; an empty query returns the filtered
    incidents unranked.
    """
    try:
        filters = None
        if body.filters:
            filters = SearchFilters(**body.filters.model_dump())

        options = SearchOptions(
            query=body.query,
            filters=filters,
            limit=body.limit or settings.search_default_limit,
            threshold=(
                body.threshold if body.threshold is not None
                else settings.search_default_threshold
            ),
        )
        incidents = [inc.model_dump() for inc in body.incidents]
        results = search_incidents(incidents, options)

        logger.info(
            f"Search returned {len(results)} of {len(incidents)} incidents")

        return [SearchResultResponse(**r.to_dict()) for r in results]
    except Exception as e:
        logger.error(f"Search failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Search failed: {str(e)}")


@router.post(
    "/incidents/suggestions",
    response_model=List[str],
    responses={
        500: {"model": ErrorResponse, "description": "Suggestion error"}
    }
)
async def suggestions(body: SuggestionsRequest):
    """Autocomplete suggestions for the search bar."""
    try:
        incidents = [inc.model_dump() for inc in body.incidents]
        return get_suggestions(incidents, body.partial_query)
    except Exception as e:
        logger.error(f"Suggestions failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Suggestions failed: {str(e)}")


@router.post(
    "/radio/analyze",
    response_model=RadioAnalysisResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Analysis error"}
    }
)
async def analyze_radio(body: RadioAnalyzeRequest):
    """Categorise a single radio message."""
    try:
        analysis = analyze_radio_message(body.message)
        return RadioAnalysisResponse(**analysis.to_dict())
    except Exception as e:
        logger.error(f"Radio analysis failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Radio analysis failed: {str(e)}")


@router.post(
    "/radio/process",
    response_model=RadioProcessResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Processing error"}
    }
)
async def process_radio(body: RadioProcessRequest, request: Request):
    """
    Analyze a radio message and draft an incident when warranted.

    Drafts are returned to the caller; nothing is persisted here.
    """
    try:
        result = process_radio_message(
            _to_radio_message(body.message),
            recent_incidents=[inc.model_dump() for inc in body.recent_incidents],
            auto_create=body.auto_create,
            classifier=_classifier(request),
        )
        return RadioProcessResponse(**result.to_dict())
    except Exception as e:
        logger.error(f"Radio processing failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Radio processing failed: {str(e)}")


@router.post(
    "/radio/channel-health",
    response_model=ChannelHealthResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Channel health error"}
    }
)
async def channel_health(body: ChannelHealthRequest):
    """Overload detection and health score for recent channel traffic."""
    try:
        window = body.time_window_minutes or settings.radio_time_window_minutes
        report = detect_overload_pattern(
            [_to_radio_message(m) for m in body.messages],
            time_window_minutes=window,
        )
        score = calculate_channel_health_score(
            report.message_rate,
            report.avg_response_time,
            report.is_overloaded,
            report.high_priority_ratio,
        )
        return ChannelHealthResponse(**report.to_dict(), health_score=score)
    except Exception as e:
        logger.error(f"Channel health check failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Channel health check failed: {str(e)}")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()
