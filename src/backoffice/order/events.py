"""Order domain events — facts about admin-side changes to an order.

All events are past tense, versioned, and carry the freshly derived
delivery status so that downstream handlers never recompute it.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from backoffice.domain import backoffice


@backoffice.event(part_of="Order")
class OrderRegistered:
    """A checked-out order entered the admin workflow."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_name = String()
    order_type = String(required=True)
    payment_status = String(required=True)
    items = Text()
    total_amount = Float()
    placed_at = DateTime(required=True)


@backoffice.event(part_of="Order")
class OrderAccepted:
    """An admin accepted a pending order; it is now being processed."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivery_status = String(required=True)
    notes = Text()
    accepted_at = DateTime(required=True)


@backoffice.event(part_of="Order")
class OrderRejected:
    """An admin rejected a pending order after explicit confirmation."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivery_status = String(required=True)
    reason = Text()
    notes = Text()
    rejected_at = DateTime(required=True)


@backoffice.event(part_of="Order")
class OrderStatusChanged:
    """An order moved forward through the fulfillment state machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    delivery_status = String(required=True)
    notes = Text()
    changed_at = DateTime(required=True)


@backoffice.event(part_of="Order")
class OrderAllotmentChanged:
    """Vendor and/or courier allotment of an order changed."""

    __version__ = 1

    order_id = Identifier(required=True)
    action = String(required=True)
    vendor_state = String(required=True)
    vendor_name = String()
    courier_state = String(required=True)
    tracking_id = String()
    delivery_status = String(required=True)
    changed_at = DateTime(required=True)


@backoffice.event(part_of="Order")
class OrderNotesUpdated:
    """The admin's internal notes on an order were replaced."""

    __version__ = 1

    order_id = Identifier(required=True)
    notes = Text()
    updated_at = DateTime(required=True)
