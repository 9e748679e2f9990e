"""Accept, reject and forward status overrides for orders.

Every transition may carry the admin's internal notes. Rejections may also
carry a reason, which is kept on the order and sent with the notification.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from backoffice.domain import backoffice
from backoffice.errors import check_version
from backoffice.order.order import Order

logger = structlog.get_logger(__name__)


@backoffice.command(part_of="Order")
class AcceptOrder:
    """Accept a pending order and start processing it."""

    order_id = Identifier(required=True)
    notes = Text()
    expected_version = Integer()


@backoffice.command(part_of="Order")
class RejectOrder:
    """Reject a pending order. `confirmed` records the admin's explicit confirmation."""

    order_id = Identifier(required=True)
    confirmed = Boolean(default=False)
    reason = Text()
    notes = Text()
    expected_version = Integer()


@backoffice.command(part_of="Order")
class ChangeOrderStatus:
    """Move an order forward through its fulfillment states."""

    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)
    confirmed = Boolean(default=False)
    reason = Text()
    notes = Text()
    expected_version = Integer()


@backoffice.command(part_of="Order")
class UpdateOrderNotes:
    order_id = Identifier(required=True)
    notes = Text()
    expected_version = Integer()


@backoffice.command_handler(part_of=Order)
class OrderStatusHandler:
    def _load(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        check_version(order, command.expected_version)
        return repo, order

    @handle(AcceptOrder)
    def accept_order(self, command):
        repo, order = self._load(command)
        order.accept(notes=command.notes)
        repo.add(order)
        logger.info("Order accepted", order_id=order.order_id)
        return order.to_dict()

    @handle(RejectOrder)
    def reject_order(self, command):
        repo, order = self._load(command)
        order.reject(confirmed=command.confirmed, reason=command.reason, notes=command.notes)
        repo.add(order)
        logger.info("Order rejected", order_id=order.order_id, reason=order.rejection_reason)
        return order.to_dict()

    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo, order = self._load(command)
        previous = order.status
        order.change_status(
            command.new_status,
            confirmed=command.confirmed,
            notes=command.notes,
            reason=command.reason,
        )
        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=order.order_id,
            previous_status=previous,
            new_status=order.status,
        )
        return order.to_dict()

    @handle(UpdateOrderNotes)
    def update_order_notes(self, command):
        repo, order = self._load(command)
        order.update_notes(command.notes)
        repo.add(order)
        logger.info("Order notes updated", order_id=order.order_id)
        return order.to_dict()
