"""Order registration — command and handler.

Checkout hands every placed order to the backoffice through this command;
the order enters the admin workflow in PENDING.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from backoffice.domain import backoffice
from backoffice.order.order import Order

logger = structlog.get_logger(__name__)


def _parse_items(items) -> list | None:
    if not items:
        return None
    try:
        parsed = json.loads(items) if isinstance(items, str) else items
    except ValueError:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from None
    if not isinstance(parsed, list):
        raise ValidationError({"items": ["Items must be a JSON list"]})
    return parsed


@backoffice.command(part_of="Order")
class RegisterOrder:
    """Register a checked-out order with the admin console."""

    order_id = Identifier(required=True)
    order_type = String(required=True, max_length=50)
    payment_status = String(max_length=50, default="Pending")
    customer_name = String(max_length=200)
    items = Text()  # JSON list of line items
    total_amount = Float()
    placed_at = DateTime()


@backoffice.command_handler(part_of=Order)
class RegisterOrderHandler:
    @handle(RegisterOrder)
    def register_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            repo.get(command.order_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"order_id": [f"Order {command.order_id} is already registered"]})

        items_data = _parse_items(command.items)
        order = Order.register(
            order_id=command.order_id,
            order_type=command.order_type,
            payment_status=command.payment_status,
            customer_name=command.customer_name,
            items_data=items_data,
            total_amount=command.total_amount,
            placed_at=command.placed_at,
        )
        repo.add(order)
        logger.info("Order registered", order_id=order.order_id, order_type=order.order_type)
        return order.to_dict()
