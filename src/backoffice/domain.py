"""Backoffice bounded context — Order Fulfillment Workflow for the admin console.

Handles the admin side of an order after checkout: accept/reject decisions,
fulfillment status changes, vendor and courier allotment, and the
return/exchange decision workflow. Uses CQRS because every record is a
small state machine mutated through commands and read through filters.
"""

from protean.domain import Domain

from backoffice.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

backoffice = Domain(name="backoffice")
