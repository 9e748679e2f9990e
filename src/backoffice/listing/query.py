"""Filter/query engine behind the Orders, Returns and Exchanges tabs.

A query selects one collection by tab and ANDs its predicates over it:
status, order type, an inclusive date range, payment status (Orders only),
vendor and courier assignment, and a free-text search. The dropdown
placeholders "Order Status" and "Order Type" mean "do not filter", as does
leaving any other predicate unset. Records come back in the order they were
stored; nothing is sorted.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from backoffice.aftersales.request import AfterSalesRequest, RequestKind, parse_decision_status
from backoffice.order.order import Order, parse_order_status, parse_order_type, parse_payment_status

STATUS_SENTINEL = "Order Status"
ORDER_TYPE_SENTINEL = "Order Type"

PAGE_SIZE = 100


class Tab(Enum):
    ORDERS = "Orders"
    RETURNS = "Returns"
    EXCHANGES = "Exchanges"


_TAB_KIND = {Tab.RETURNS: RequestKind.RETURN, Tab.EXCHANGES: RequestKind.EXCHANGE}


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


def _lower_bound(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.min, tzinfo=UTC)


def _upper_bound(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.max, tzinfo=UTC)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range. Bare dates cover the whole day; a missing bound is open."""

    start: date | datetime | None = None
    end: date | datetime | None = None

    def __post_init__(self):
        if self.start is not None and self.end is not None:
            if _lower_bound(self.start) > _upper_bound(self.end):
                raise ValidationError({"date_range": ["Start date must not be after end date"]})

    def contains(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        moment = _as_utc(moment)
        if self.start is not None and moment < _lower_bound(self.start):
            return False
        if self.end is not None and moment > _upper_bound(self.end):
            return False
        return True


def parse_bound(value: str | None, field: str) -> date | datetime | None:
    """Parse "2024-05-01" as a bare date, anything longer as an ISO timestamp."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError({field: [f"Invalid date: {value!r}"]}) from None


@dataclass(frozen=True)
class ListingFilter:
    status: str = STATUS_SENTINEL
    order_type: str = ORDER_TYPE_SENTINEL
    date_range: DateRange | None = None
    payment_status: str | None = None
    vendor_assigned: bool | None = None
    courier_assigned: bool | None = None
    search: str | None = None  # substring of the record's ids or the customer name


def _is_sentinel(value: str | None, sentinel: str = "") -> bool:
    return value is None or not str(value).strip() or str(value).strip().lower() == sentinel.lower()


def _searchable(record, tab: Tab) -> tuple:
    if tab == Tab.ORDERS:
        return record.order_id, record.customer_name
    return record.request_id, record.order_id


def _matches_search(record, tab: Tab, needle: str) -> bool:
    return any(needle in str(value).lower() for value in _searchable(record, tab) if value)


def _fetch_all(aggregate_cls, **criteria) -> list:
    """Read every matching record page by page, in storage order."""
    dao = current_domain.repository_for(aggregate_cls)._dao
    records = []
    offset = 0
    while True:
        queryset = dao.query.filter(**criteria) if criteria else dao.query
        page = queryset.offset(offset).limit(PAGE_SIZE).all()
        records.extend(page.items)
        if not page.has_next:
            return records
        offset += PAGE_SIZE


def query(tab: Tab | str, listing_filter: ListingFilter | None = None) -> list:
    """Return the records of `tab` that satisfy every active predicate."""
    tab = Tab(tab)
    listing_filter = listing_filter or ListingFilter()

    criteria = {}
    if not _is_sentinel(listing_filter.order_type, ORDER_TYPE_SENTINEL):
        criteria["order_type"] = parse_order_type(listing_filter.order_type).value

    if tab == Tab.ORDERS:
        aggregate_cls = Order
        if not _is_sentinel(listing_filter.status, STATUS_SENTINEL):
            criteria["status"] = parse_order_status(listing_filter.status).value
        if not _is_sentinel(listing_filter.payment_status):
            criteria["payment_status"] = parse_payment_status(listing_filter.payment_status).value
    else:
        if not _is_sentinel(listing_filter.payment_status):
            raise ValidationError({"payment_status": [f"The {tab.value} tab cannot be filtered by payment status"]})
        aggregate_cls = AfterSalesRequest
        criteria["kind"] = _TAB_KIND[tab].value
        if not _is_sentinel(listing_filter.status, STATUS_SENTINEL):
            try:
                criteria["decision_status"] = parse_decision_status(listing_filter.status).value
            except ValidationError:
                raise ValidationError(
                    {"status": [f"Unknown {tab.value.lower()} status: {listing_filter.status!r}"]}
                ) from None

    records = _fetch_all(aggregate_cls, **criteria)

    if listing_filter.date_range is not None:
        timestamp = "placed_at" if tab == Tab.ORDERS else "requested_at"
        records = [r for r in records if listing_filter.date_range.contains(getattr(r, timestamp))]

    if listing_filter.vendor_assigned is not None:
        records = [r for r in records if r.vendor_allotment.is_allotted == listing_filter.vendor_assigned]

    if listing_filter.courier_assigned is not None:
        records = [r for r in records if r.courier_allotment.is_allotted == listing_filter.courier_assigned]

    if not _is_sentinel(listing_filter.search):
        needle = listing_filter.search.strip().lower()
        records = [r for r in records if _matches_search(r, tab, needle)]

    return records


def list_orders(listing_filter: ListingFilter | None = None) -> list[Order]:
    return query(Tab.ORDERS, listing_filter)


def list_returns(listing_filter: ListingFilter | None = None) -> list[AfterSalesRequest]:
    return query(Tab.RETURNS, listing_filter)


def list_exchanges(listing_filter: ListingFilter | None = None) -> list[AfterSalesRequest]:
    return query(Tab.EXCHANGES, listing_filter)
