"""Notification dispatch — tells the outside world about final outcomes.

Orders that reach a terminal status (Delivered, Cancelled, Rejected) and
Return/Exchange decisions are forwarded to the notifier. Dispatch is
fire-and-forget: a failed notification is logged and never fails the
command that caused it.
"""

import structlog
from protean.utils.mixins import handle

from backoffice.aftersales.events import AfterSalesRequestDecided
from backoffice.aftersales.request import AfterSalesRequest
from backoffice.domain import backoffice
from backoffice.notifications import get_notifier
from backoffice.order.events import OrderRejected, OrderStatusChanged
from backoffice.order.order import TERMINAL_STATUSES, Order, OrderStatus

logger = structlog.get_logger(__name__)


def send_notification(topic: str, record_id: str, payload: dict) -> bool:
    """Hand a notification to the configured notifier. Returns True when it was sent."""
    try:
        result = get_notifier().notify(topic, record_id, payload)
    except Exception as e:
        logger.error("Notification dispatch failed", topic=topic, record_id=record_id, error=str(e))
        return False

    if result.get("status") != "sent":
        logger.warning(
            "Notification not delivered",
            topic=topic,
            record_id=record_id,
            error=result.get("error", "Unknown dispatch error"),
        )
        return False

    logger.info("Notification sent", topic=topic, record_id=record_id, message_id=result.get("message_id"))
    return True


@backoffice.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Notifies on orders reaching a terminal status."""

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        if OrderStatus(event.new_status) not in TERMINAL_STATUSES:
            return
        send_notification(
            f"order.{event.new_status.lower()}",
            str(event.order_id),
            {"status": event.new_status, "delivery_status": event.delivery_status},
        )

    @handle(OrderRejected)
    def on_order_rejected(self, event: OrderRejected) -> None:
        send_notification(
            "order.rejected",
            str(event.order_id),
            {
                "status": OrderStatus.REJECTED.value,
                "delivery_status": event.delivery_status,
                "reason": event.reason,
            },
        )


@backoffice.event_handler(part_of=AfterSalesRequest)
class RequestNotificationHandler:
    """Notifies on Return/Exchange decisions."""

    @handle(AfterSalesRequestDecided)
    def on_request_decided(self, event: AfterSalesRequestDecided) -> None:
        send_notification(
            f"{event.kind.lower()}.{event.decision.lower()}",
            str(event.request_id),
            {
                "order_id": str(event.order_id),
                "decision": event.decision,
                "explanation": event.explanation,
                "delivery_status": event.delivery_status,
            },
        )
