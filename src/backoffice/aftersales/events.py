"""Return/Exchange request domain events."""

from protean.fields import DateTime, Identifier, String, Text

from backoffice.domain import backoffice


@backoffice.event(part_of="AfterSalesRequest")
class AfterSalesRequestOpened:
    """A customer asked to return or exchange (part of) an order."""

    __version__ = 1

    request_id = Identifier(required=True)
    kind = String(required=True)
    order_id = Identifier(required=True)
    order_type = String(required=True)
    reason = String(required=True)
    requested_at = DateTime(required=True)


@backoffice.event(part_of="AfterSalesRequest")
class AfterSalesRequestDecided:
    """An admin accepted or rejected a request."""

    __version__ = 1

    request_id = Identifier(required=True)
    kind = String(required=True)
    order_id = Identifier(required=True)
    decision = String(required=True)
    explanation = Text()
    delivery_status = String(required=True)
    decided_at = DateTime(required=True)


@backoffice.event(part_of="AfterSalesRequest")
class AfterSalesAllotmentChanged:
    """Vendor and/or courier allotment of an accepted request changed."""

    __version__ = 1

    request_id = Identifier(required=True)
    kind = String(required=True)
    action = String(required=True)
    vendor_state = String(required=True)
    vendor_name = String()
    courier_state = String(required=True)
    tracking_id = String()
    delivery_status = String(required=True)
    changed_at = DateTime(required=True)
