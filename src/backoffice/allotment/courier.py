"""Courier allotment plumbing shared by order and request handlers.

The tracking provider is called before any state changes; a failed call
leaves the record untouched.
"""

import structlog

from backoffice.errors import TrackingUnavailable
from backoffice.tracking import get_tracking_provider

logger = structlog.get_logger(__name__)


def issue_tracking_id(record_id: str) -> str:
    result = get_tracking_provider().generate_tracking_id(record_id)
    tracking_id = result.get("tracking_id")
    if not tracking_id:
        reason = result.get("error") or "Tracking provider returned no tracking id"
        logger.warning("Tracking id could not be issued", record_id=record_id, reason=reason)
        raise TrackingUnavailable({"courier_allotment": [reason]})
    return tracking_id
