"""Analytics event and lead capture.

Both operations stamp the submission with server-side context (time, client
address) and append it to the configured event sink. Nothing is read back.
"""
from typing import Optional

from timesaver.core.logging import get_logger, utc_timestamp
from timesaver.domain.events import AnalyticsRecord, AnalyticsRequest, LeadRecord, LeadRequest
from timesaver.infrastructure.sinks import ANALYTICS, LEADS, EventSink
from timesaver.utils.text import sanitize_text

logger = get_logger(__name__)


def record_analytics_event(
    sink: EventSink,
    request: AnalyticsRequest,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AnalyticsRecord:
    """Append an analytics event to the sink.

    The event name is cleaned when it is a string; properties are passed
    through untouched.
    """
    event = sanitize_text(request.event) if isinstance(request.event, str) else request.event
    record = AnalyticsRecord(
        timestamp=utc_timestamp(),
        event=event,
        properties=request.properties,
        ip=ip,
        user_agent=sanitize_text(user_agent),
    )
    sink.write(ANALYTICS, record.model_dump())
    return record


def capture_lead(sink: EventSink, lead: LeadRequest, ip: Optional[str] = None) -> LeadRecord:
    """Append a captured lead to the sink."""
    record = LeadRecord(
        timestamp=utc_timestamp(),
        email=sanitize_text(lead.email),
        phone=sanitize_text(lead.phone),
        company=sanitize_text(lead.company),
        calculated_hours=(
            sanitize_text(lead.calculated_hours)
            if isinstance(lead.calculated_hours, str)
            else lead.calculated_hours
        ),
        ip=ip,
    )
    sink.write(LEADS, record.model_dump())
    logger.info("Lead captured", extra={"sink": sink.name})
    return record
