"""Pydantic API schemas for the backoffice console.

These are the external API contracts, separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class RegisterOrderRequest(BaseModel):
    order_id: str
    order_type: str
    payment_status: str = "Pending"
    customer_name: str | None = None
    items: list[dict] = []
    total_amount: float | None = None
    placed_at: datetime | None = None


class VersionedRequest(BaseModel):
    expected_version: int | None = None


class AcceptOrderRequest(VersionedRequest):
    notes: str | None = None


class RejectOrderRequest(VersionedRequest):
    confirmed: bool = False
    reason: str | None = None
    notes: str | None = None


class ChangeOrderStatusRequest(VersionedRequest):
    new_status: str
    confirmed: bool = False
    reason: str | None = None
    notes: str | None = None


class OrderNotesRequest(VersionedRequest):
    notes: str | None = None


class BulkStatusRequest(BaseModel):
    order_ids: list[str]
    new_status: str
    confirmed: bool = False


class AllotmentRequest(VersionedRequest):
    allot: bool


class SelectVendorRequest(VersionedRequest):
    vendor_name: str | None = None


class OpenRequestRequest(BaseModel):
    order_id: str
    reason: str
    request_id: str | None = None
    requested_at: datetime | None = None


class DecisionRequest(VersionedRequest):
    decision: str
    explanation: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class BulkStatusResponse(BaseModel):
    results: list[dict]


class VendorListResponse(BaseModel):
    vendors: list[str]


class OrderStatisticsResponse(BaseModel):
    by_status: dict[str, int]
    ordered: int
    delivered: int
    cancelled: int


class RequestStatisticsResponse(BaseModel):
    kind: str
    by_decision: dict[str, int]
    total: int
