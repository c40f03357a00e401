"""FastAPI routes for the calculator, analytics and lead capture endpoints.

All endpoints are stateless: a calculation is recomputed on every call and
analytics events and leads are only appended to the event sink.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from timesaver.core.errors import ApiError
from timesaver.core.logging import get_logger, LogTimer
from timesaver.domain.events import AnalyticsRequest, LeadRequest, SuccessResponse
from timesaver.domain.usage import CalculationRequest, CalculationResponse
from timesaver.infrastructure.sinks import EventSink
from timesaver.services.calculator import calculate_savings
from timesaver.services.tracking import capture_lead, record_analytics_event

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["api"])

INTERNAL_ERROR = "Internal server error"


def get_event_sink(request: Request) -> EventSink:
    """Event sink attached to the running application."""
    return request.app.state.event_sink


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(req: CalculationRequest):
    """Estimate weekly hours saved for the submitted usage.

    Example:
        POST /api/calculate
        {"emailsPerWeek": 200, "dataEntry": 10, "followUps": 50, "reporting": 5}
    """
    try:
        with LogTimer(logger, "calculate_savings"):
            return calculate_savings(req)
    except Exception as exc:
        logger.error(f"Calculation error: {exc}", exc_info=True)
        raise ApiError(500, INTERNAL_ERROR, details=str(exc))


@router.post("/analytics", response_model=SuccessResponse, response_model_exclude_none=True)
async def analytics(
    request: Request,
    payload: Any = Body(default=None),
    sink: EventSink = Depends(get_event_sink),
):
    """Record a fire-and-forget analytics event.

    Any JSON body is accepted; non-object bodies record an empty event.
    """
    req = AnalyticsRequest.model_validate(payload) if isinstance(payload, dict) else AnalyticsRequest()
    try:
        record_analytics_event(
            sink,
            req,
            ip=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
    except Exception as exc:
        logger.error(f"Analytics error: {exc}", exc_info=True)
        raise ApiError(500, INTERNAL_ERROR, details=str(exc))

    return SuccessResponse()


@router.post("/lead", response_model=SuccessResponse)
async def lead(
    req: LeadRequest,
    request: Request,
    sink: EventSink = Depends(get_event_sink),
):
    """Capture a lead from the landing page form.

    Example:
        POST /api/lead
        {"email": "ops@acme.example", "company": "Acme", "calculatedHours": 12}
    """
    try:
        capture_lead(sink, req, ip=_client_ip(request))
    except Exception as exc:
        logger.error(f"Lead capture error: {exc}", exc_info=True)
        raise ApiError(500, INTERNAL_ERROR, details=str(exc))

    return SuccessResponse(message="Lead captured successfully")
