"""AfterSalesRequest aggregate — Return and Exchange requests raised against an order.

Both kinds share one lifecycle and differ only in their reason catalogue and
in the wording of their delivery status:

    PENDING → ACCEPTED   (allotment becomes possible)
    PENDING → REJECTED   (explanation required)

Decisions are final. Once accepted, a request is allotted to a vendor and a
courier exactly like an order.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text, ValueObject

from backoffice.aftersales.events import (
    AfterSalesAllotmentChanged,
    AfterSalesRequestDecided,
    AfterSalesRequestOpened,
)
from backoffice.allotment import allotment
from backoffice.allotment.allotment import CourierAllotment, VendorAllotment
from backoffice.allotment.delivery import request_delivery_status
from backoffice.domain import backoffice
from backoffice.errors import ExplanationRequired, IllegalTransition


class RequestKind(Enum):
    RETURN = "Return"
    EXCHANGE = "Exchange"


class DecisionStatus(Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


RETURN_REASONS = (
    "Size/fit issue",
    "Product not as expected",
    "Wrong item received",
    "Damaged/defective product",
    "Late delivery",
    "Quality not as expected",
)

EXCHANGE_REASONS = (
    "Size/fit issue",
    "Wrong color received",
    "Defective product",
    "Product not as expected",
    "Want different style",
    "Better option available",
    "Size unavailable for return",
)

REASONS = {
    RequestKind.RETURN: RETURN_REASONS,
    RequestKind.EXCHANGE: EXCHANGE_REASONS,
}

_ID_PREFIX = {RequestKind.RETURN: "RET", RequestKind.EXCHANGE: "EXC"}


def parse_decision_status(value: str) -> DecisionStatus:
    key = str(value).strip().lower()
    for decision in DecisionStatus:
        if decision.value.lower() == key:
            return decision
    raise ValidationError({"decision": [f"Unknown decision: {value!r}"]})


def _match_reason(kind: RequestKind, reason: str | None) -> str:
    key = (reason or "").strip().lower()
    for candidate in REASONS[kind]:
        if candidate.lower() == key:
            return candidate
    raise ValidationError({"reason": [f"{reason!r} is not a valid {kind.value.lower()} reason"]})


@backoffice.aggregate
class AfterSalesRequest:
    request_id = Identifier(identifier=True, required=True)
    kind = String(choices=RequestKind, required=True)
    order_id = Identifier(required=True)
    order_type = String(max_length=50, required=True)
    reason = String(max_length=100, required=True)
    decision_status = String(choices=DecisionStatus, default=DecisionStatus.PENDING.value)
    explanation = Text()
    vendor_allotment = ValueObject(VendorAllotment)
    courier_allotment = ValueObject(CourierAllotment)
    delivery_status = String(max_length=50)
    requested_at = DateTime()
    decided_at = DateTime()
    last_updated = DateTime()

    @invariant.post
    def rejection_is_explained(self):
        if self.decision_status == DecisionStatus.REJECTED.value and not (self.explanation or "").strip():
            raise ValidationError({"explanation": ["A rejected request must carry an explanation"]})

    @invariant.post
    def courier_requires_vendor(self):
        if self.courier_allotment and self.courier_allotment.is_allotted:
            if not (self.vendor_allotment and self.vendor_allotment.is_allotted):
                raise ValidationError({"courier_allotment": ["A courier cannot be allotted without an allotted vendor"]})

    @invariant.post
    def delivery_status_is_derived(self):
        if self.delivery_status != self._derived_delivery_status():
            raise ValidationError({"delivery_status": ["Delivery status is out of sync with decision and allotment"]})

    @classmethod
    def open(
        cls,
        kind: str,
        order_id: str,
        order_type: str,
        reason: str,
        request_id: str | None = None,
        requested_at: datetime | None = None,
    ):
        """Open a pending request against an existing order."""
        request_kind = RequestKind(kind)
        reason = _match_reason(request_kind, reason)
        request_id = request_id or f"{_ID_PREFIX[request_kind]}-{uuid.uuid4().hex[:12].upper()}"
        now = datetime.now(UTC)
        requested_at = requested_at or now
        vendor = allotment.unallotted_vendor()
        courier = allotment.unallotted_courier()

        request = cls(
            request_id=request_id,
            kind=request_kind.value,
            order_id=order_id,
            order_type=order_type,
            reason=reason,
            decision_status=DecisionStatus.PENDING.value,
            vendor_allotment=vendor,
            courier_allotment=courier,
            delivery_status=request_delivery_status(
                request_kind.value, DecisionStatus.PENDING.value, vendor.state, courier.state
            ),
            requested_at=requested_at,
            last_updated=now,
        )
        request.raise_(
            AfterSalesRequestOpened(
                request_id=request_id,
                kind=request_kind.value,
                order_id=order_id,
                order_type=order_type,
                reason=reason,
                requested_at=requested_at,
            )
        )
        return request

    def _derived_delivery_status(self) -> str:
        vendor_state = self.vendor_allotment.state if self.vendor_allotment else None
        courier_state = self.courier_allotment.state if self.courier_allotment else None
        return request_delivery_status(self.kind, self.decision_status, vendor_state, courier_state)

    # -------------------------------------------------------------------
    # Decision
    # -------------------------------------------------------------------
    def decide(self, decision: str, explanation: str | None = None) -> None:
        """Accept or reject a pending request. Rejections must be explained."""
        target = parse_decision_status(decision)
        if target == DecisionStatus.PENDING:
            raise ValidationError({"decision": ["A decision must be Accepted or Rejected"]})
        if self.decision_status != DecisionStatus.PENDING.value:
            raise IllegalTransition(
                {"decision_status": [f"{self.kind} request was already {self.decision_status.lower()}"]}
            )
        explanation = (explanation or "").strip() or None
        if target == DecisionStatus.REJECTED and not explanation:
            raise ExplanationRequired({"explanation": ["An explanation is required to reject a request"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.decision_status = target.value
            self.explanation = explanation
            self.delivery_status = self._derived_delivery_status()
            self.decided_at = now
            self.last_updated = now

        self.raise_(
            AfterSalesRequestDecided(
                request_id=self.request_id,
                kind=self.kind,
                order_id=self.order_id,
                decision=self.decision_status,
                explanation=self.explanation,
                delivery_status=self.delivery_status,
                decided_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Allotment
    # -------------------------------------------------------------------
    def _assert_allotment_open(self) -> None:
        if self.decision_status != DecisionStatus.ACCEPTED.value:
            raise IllegalTransition(
                {"decision_status": [f"Only accepted requests can be allotted (request is {self.decision_status})"]}
            )

    def _apply_allotment(self, action: str, vendor: VendorAllotment, courier: CourierAllotment) -> None:
        if vendor == self.vendor_allotment and courier == self.courier_allotment:
            return

        now = datetime.now(UTC)
        with atomic_change(self):
            self.vendor_allotment = vendor
            self.courier_allotment = courier
            self.delivery_status = self._derived_delivery_status()
            self.last_updated = now
        self.raise_(
            AfterSalesAllotmentChanged(
                request_id=self.request_id,
                kind=self.kind,
                action=action,
                vendor_state=vendor.state,
                vendor_name=vendor.vendor_name,
                courier_state=courier.state,
                tracking_id=courier.tracking_id,
                delivery_status=self.delivery_status,
                changed_at=now,
            )
        )

    def set_vendor_allotment(self, allot: bool) -> None:
        self._assert_allotment_open()
        if allot:
            vendor = allotment.open_vendor_selection(self.vendor_allotment)
            self._apply_allotment("VendorSelectionOpened", vendor, self.courier_allotment)
        else:
            vendor, courier = allotment.revoke_vendor()
            self._apply_allotment("VendorRevoked", vendor, courier)

    def select_vendor(self, vendor_name: str) -> None:
        self._assert_allotment_open()
        vendor = allotment.select_vendor(self.vendor_allotment, vendor_name)
        self._apply_allotment("VendorSelected", vendor, self.courier_allotment)

    def confirm_vendor(self) -> None:
        self._assert_allotment_open()
        vendor = allotment.confirm_vendor(self.vendor_allotment)
        self._apply_allotment("VendorAllotted", vendor, self.courier_allotment)

    def ensure_courier_allottable(self) -> None:
        self._assert_allotment_open()
        allotment.ensure_vendor_allotted(self.vendor_allotment)

    def set_courier_allotment(self, allot: bool, tracking_id: str | None = None) -> None:
        self.ensure_courier_allottable()
        if allot:
            if self.courier_allotment.is_allotted:
                return
            courier = allotment.allot_courier(self.vendor_allotment, tracking_id)
            self._apply_allotment("CourierAllotted", self.vendor_allotment, courier)
        else:
            courier = allotment.release_courier(self.vendor_allotment)
            self._apply_allotment("CourierReleased", self.vendor_allotment, courier)
