"""Dashboard counters for the Orders, Returns and Exchanges tabs."""

from backoffice.aftersales.request import DecisionStatus, RequestKind
from backoffice.listing.query import Tab, query
from backoffice.order.order import OrderStatus


def order_statistics() -> dict:
    """Orders per status, plus the ordered/delivered/cancelled headline figures.

    "ordered" counts every order that was not cancelled or rejected.
    """
    counts = {status.value: 0 for status in OrderStatus}
    for order in query(Tab.ORDERS):
        counts[order.status] += 1

    cancelled = counts[OrderStatus.CANCELLED.value] + counts[OrderStatus.REJECTED.value]
    return {
        "by_status": counts,
        "ordered": sum(counts.values()) - cancelled,
        "delivered": counts[OrderStatus.DELIVERED.value],
        "cancelled": cancelled,
    }


def request_statistics(kind: RequestKind | str) -> dict:
    kind = RequestKind(kind)
    tab = Tab.RETURNS if kind == RequestKind.RETURN else Tab.EXCHANGES

    counts = {decision.value: 0 for decision in DecisionStatus}
    for request in query(tab):
        counts[request.decision_status] += 1

    return {"kind": kind.value, "by_decision": counts, "total": sum(counts.values())}
