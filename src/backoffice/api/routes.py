"""FastAPI routes for the backoffice console."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from backoffice.aftersales.allotment import (
    ConfirmRequestVendor,
    SelectRequestVendor,
    SetRequestCourierAllotment,
    SetRequestVendorAllotment,
)
from backoffice.aftersales.decision import DecideExchange, DecideReturn
from backoffice.aftersales.lookup import load_request
from backoffice.aftersales.opening import OpenExchangeRequest, OpenReturnRequest
from backoffice.aftersales.request import RequestKind
from backoffice.api.schemas import (
    AcceptOrderRequest,
    AllotmentRequest,
    BulkStatusRequest,
    BulkStatusResponse,
    ChangeOrderStatusRequest,
    DecisionRequest,
    OpenRequestRequest,
    OrderNotesRequest,
    OrderStatisticsResponse,
    RegisterOrderRequest,
    RejectOrderRequest,
    RequestStatisticsResponse,
    SelectVendorRequest,
    VendorListResponse,
    VersionedRequest,
)
from backoffice.listing.query import (
    ORDER_TYPE_SENTINEL,
    STATUS_SENTINEL,
    DateRange,
    ListingFilter,
    Tab,
    parse_bound,
    query,
)
from backoffice.listing.statistics import order_statistics, request_statistics
from backoffice.order.allotment import ConfirmVendor, SelectVendor, SetCourierAllotment, SetVendorAllotment
from backoffice.order.bulk import bulk_change_status
from backoffice.order.order import Order
from backoffice.order.registration import RegisterOrder
from backoffice.order.status import AcceptOrder, ChangeOrderStatus, RejectOrder, UpdateOrderNotes
from backoffice.vendors import list_vendors


def _record(aggregate) -> dict:
    """Serialize a record with the version clients echo back as expected_version."""
    return {**aggregate.to_dict(), "version": aggregate._version}


def _order(order_id: str) -> dict:
    return _record(current_domain.repository_for(Order).get(order_id))


def _listing_filter(
    status, order_type, start, end, payment_status=None, vendor_assigned=None, courier_assigned=None, search=None
) -> ListingFilter:
    date_range = None
    start, end = parse_bound(start, "start"), parse_bound(end, "end")
    if start is not None or end is not None:
        date_range = DateRange(start=start, end=end)
    return ListingFilter(
        status=status or STATUS_SENTINEL,
        order_type=order_type or ORDER_TYPE_SENTINEL,
        date_range=date_range,
        payment_status=payment_status,
        vendor_assigned=vendor_assigned,
        courier_assigned=courier_assigned,
        search=search,
    )


# ---------------------------------------------------------------------------
# Orders Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("")
async def list_orders(
    status: str | None = None,
    order_type: str | None = None,
    start: str | None = None,
    end: str | None = None,
    payment_status: str | None = None,
    vendor_assigned: bool | None = None,
    courier_assigned: bool | None = None,
    search: str | None = None,
) -> list[dict]:
    """Orders tab. Every query parameter narrows the result; omitted ones do not filter."""
    listing_filter = _listing_filter(
        status, order_type, start, end, payment_status, vendor_assigned, courier_assigned, search
    )
    records = query(Tab.ORDERS, listing_filter)
    return [_record(r) for r in records]


@order_router.post("", status_code=201)
async def register_order(body: RegisterOrderRequest) -> dict:
    """Register a checked-out order; it enters the workflow as Pending."""
    command = RegisterOrder(
        order_id=body.order_id,
        order_type=body.order_type,
        payment_status=body.payment_status,
        customer_name=body.customer_name,
        items=json.dumps(body.items),
        total_amount=body.total_amount,
        placed_at=body.placed_at,
    )
    current_domain.process(command, asynchronous=False)
    return _order(body.order_id)


@order_router.get("/statistics", response_model=OrderStatisticsResponse)
async def get_order_statistics() -> OrderStatisticsResponse:
    return OrderStatisticsResponse(**order_statistics())


@order_router.post("/bulk-status", response_model=BulkStatusResponse)
async def change_status_in_bulk(body: BulkStatusRequest) -> BulkStatusResponse:
    """Apply one status change to many orders; each order succeeds or fails on its own."""
    results = bulk_change_status(body.order_ids, body.new_status, confirmed=body.confirmed)
    return BulkStatusResponse(results=results)


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    return _order(order_id)


@order_router.put("/{order_id}/accept")
async def accept_order(order_id: str, body: AcceptOrderRequest | None = None) -> dict:
    body = body or AcceptOrderRequest()
    command = AcceptOrder(order_id=order_id, notes=body.notes, expected_version=body.expected_version)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/reject")
async def reject_order(order_id: str, body: RejectOrderRequest) -> dict:
    """Reject a pending order. The body must carry `confirmed: true`."""
    command = RejectOrder(
        order_id=order_id,
        confirmed=body.confirmed,
        reason=body.reason,
        notes=body.notes,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/status")
async def change_order_status(order_id: str, body: ChangeOrderStatusRequest) -> dict:
    command = ChangeOrderStatus(
        order_id=order_id,
        new_status=body.new_status,
        confirmed=body.confirmed,
        reason=body.reason,
        notes=body.notes,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/notes")
async def update_order_notes(order_id: str, body: OrderNotesRequest) -> dict:
    """Save the admin's internal notes on an order."""
    command = UpdateOrderNotes(order_id=order_id, notes=body.notes, expected_version=body.expected_version)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/vendor")
async def set_order_vendor_allotment(order_id: str, body: AllotmentRequest) -> dict:
    command = SetVendorAllotment(order_id=order_id, allot=body.allot, expected_version=body.expected_version)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/vendor/select")
async def select_order_vendor(order_id: str, body: SelectVendorRequest) -> dict:
    command = SelectVendor(order_id=order_id, vendor_name=body.vendor_name, expected_version=body.expected_version)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/vendor/confirm")
async def confirm_order_vendor(order_id: str, body: VersionedRequest | None = None) -> dict:
    expected_version = body.expected_version if body else None
    current_domain.process(ConfirmVendor(order_id=order_id, expected_version=expected_version), asynchronous=False)
    return _order(order_id)


@order_router.put("/{order_id}/courier")
async def set_order_courier_allotment(order_id: str, body: AllotmentRequest) -> dict:
    command = SetCourierAllotment(order_id=order_id, allot=body.allot, expected_version=body.expected_version)
    current_domain.process(command, asynchronous=False)
    return _order(order_id)


# ---------------------------------------------------------------------------
# Returns / Exchanges Routers
# ---------------------------------------------------------------------------
def _request_router(kind: RequestKind, tab: Tab, open_command, decide_command) -> APIRouter:
    """Build the router of one after-sales tab; both tabs expose the same operations."""
    router = APIRouter(prefix=f"/{tab.value.lower()}", tags=[tab.value.lower()])

    def _request(request_id: str) -> dict:
        _, request = load_request(request_id, kind.value)
        return _record(request)

    @router.get("")
    async def list_requests(
        status: str | None = None,
        order_type: str | None = None,
        start: str | None = None,
        end: str | None = None,
        vendor_assigned: bool | None = None,
        courier_assigned: bool | None = None,
        search: str | None = None,
    ) -> list[dict]:
        listing_filter = _listing_filter(
            status,
            order_type,
            start,
            end,
            vendor_assigned=vendor_assigned,
            courier_assigned=courier_assigned,
            search=search,
        )
        records = query(tab, listing_filter)
        return [_record(r) for r in records]

    @router.post("", status_code=201)
    async def open_request(body: OpenRequestRequest) -> dict:
        command = open_command(
            order_id=body.order_id,
            reason=body.reason,
            request_id=body.request_id,
            requested_at=body.requested_at,
        )
        result = current_domain.process(command, asynchronous=False)
        return _request(result["request_id"])

    @router.get("/statistics", response_model=RequestStatisticsResponse)
    async def get_request_statistics() -> RequestStatisticsResponse:
        return RequestStatisticsResponse(**request_statistics(kind))

    @router.get("/{request_id}")
    async def get_request(request_id: str) -> dict:
        return _request(request_id)

    @router.put("/{request_id}/decision")
    async def decide_request(request_id: str, body: DecisionRequest) -> dict:
        command = decide_command(
            request_id=request_id,
            decision=body.decision,
            explanation=body.explanation,
            expected_version=body.expected_version,
        )
        current_domain.process(command, asynchronous=False)
        return _request(request_id)

    @router.put("/{request_id}/vendor")
    async def set_vendor_allotment(request_id: str, body: AllotmentRequest) -> dict:
        command = SetRequestVendorAllotment(
            request_id=request_id, kind=kind.value, allot=body.allot, expected_version=body.expected_version
        )
        current_domain.process(command, asynchronous=False)
        return _request(request_id)

    @router.put("/{request_id}/vendor/select")
    async def select_vendor(request_id: str, body: SelectVendorRequest) -> dict:
        command = SelectRequestVendor(
            request_id=request_id,
            kind=kind.value,
            vendor_name=body.vendor_name,
            expected_version=body.expected_version,
        )
        current_domain.process(command, asynchronous=False)
        return _request(request_id)

    @router.put("/{request_id}/vendor/confirm")
    async def confirm_vendor(request_id: str, body: VersionedRequest | None = None) -> dict:
        command = ConfirmRequestVendor(
            request_id=request_id, kind=kind.value, expected_version=body.expected_version if body else None
        )
        current_domain.process(command, asynchronous=False)
        return _request(request_id)

    @router.put("/{request_id}/courier")
    async def set_courier_allotment(request_id: str, body: AllotmentRequest) -> dict:
        command = SetRequestCourierAllotment(
            request_id=request_id, kind=kind.value, allot=body.allot, expected_version=body.expected_version
        )
        current_domain.process(command, asynchronous=False)
        return _request(request_id)

    return router


returns_router = _request_router(RequestKind.RETURN, Tab.RETURNS, OpenReturnRequest, DecideReturn)
exchanges_router = _request_router(RequestKind.EXCHANGE, Tab.EXCHANGES, OpenExchangeRequest, DecideExchange)


# ---------------------------------------------------------------------------
# Vendors Router
# ---------------------------------------------------------------------------
vendor_router = APIRouter(prefix="/vendors", tags=["vendors"])


@vendor_router.get("", response_model=VendorListResponse)
async def get_vendors() -> VendorListResponse:
    """Vendors selectable in the allotment step."""
    return VendorListResponse(vendors=list_vendors())
