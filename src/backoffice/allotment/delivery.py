"""Delivery-status derivation.

The human-facing delivery status of a record is never stored independently:
it is recomputed from (status, vendor state, courier state) after every
mutation, through the two functions below. The exact strings are part of the
console's contract.
"""

from backoffice.allotment.allotment import CourierState, VendorState

ORDER_PLACED = "Order Placed"
PENDING_SHIPMENT = "Pending Shipment"
SHIPPED = "Shipped"
IN_TRANSIT = "In Transit"
DELIVERED = "Delivered"
CANCELLED = "Cancelled"

# Per request kind: (requested, approved, rejected)
_REQUEST_VOCABULARY = {
    "Return": ("Return Requested", "Return Approved", "Return Rejected"),
    "Exchange": ("Exchange Requested", "Exchange Accepted", "Exchange Rejected"),
}


def _fully_allotted(vendor_state: str, courier_state: str) -> bool:
    return vendor_state == VendorState.ALLOTTED.value and courier_state == CourierState.ALLOTTED.value


def order_delivery_status(status: str, vendor_state: str, courier_state: str) -> str:
    """Derive an Order's delivery status.

    Pending orders are "Order Placed" whatever their allotment; finished
    orders report their outcome; in-progress orders are "Pending Shipment"
    until both a vendor and a courier are allotted, then "Shipped" (or
    "In Transit" once the order itself has been marked Shipped).
    """
    if status == "Pending":
        return ORDER_PLACED
    if status == "Delivered":
        return DELIVERED
    if status in ("Cancelled", "Rejected"):
        return CANCELLED
    if not _fully_allotted(vendor_state, courier_state):
        return PENDING_SHIPMENT
    if status == "Shipped":
        return IN_TRANSIT
    return SHIPPED


def request_delivery_status(kind: str, decision_status: str, vendor_state: str, courier_state: str) -> str:
    """Derive a Return/Exchange request's delivery status (same pattern, own vocabulary)."""
    requested, approved, rejected = _REQUEST_VOCABULARY[kind]
    if decision_status == "Pending":
        return requested
    if decision_status == "Rejected":
        return rejected
    if _fully_allotted(vendor_state, courier_state):
        return SHIPPED
    return approved
