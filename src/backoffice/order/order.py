"""Order aggregate (CQRS) — an order as the admin console sees it.

Orders arrive from checkout in PENDING and are then driven by admins through
accept/reject decisions, forward status changes, and vendor/courier allotment.

State Machine:
    PENDING → PROCESSING → ALLOTTED_TO_VENDOR → SHIPPED → {DELIVERED, CANCELLED}
    PENDING → REJECTED   (through reject() only, after confirmation)
    DELIVERED, CANCELLED, REJECTED are terminal.

The admin UI's "Accepted" status is the same state as PROCESSING and is
accepted as an input alias only.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text, ValueObject

from backoffice.allotment import allotment
from backoffice.allotment.allotment import CourierAllotment, VendorAllotment
from backoffice.allotment.delivery import order_delivery_status
from backoffice.domain import backoffice
from backoffice.errors import IllegalTransition
from backoffice.order.events import (
    OrderAccepted,
    OrderAllotmentChanged,
    OrderNotesUpdated,
    OrderRegistered,
    OrderRejected,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    ALLOTTED_TO_VENDOR = "AllottedToVendor"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REJECTED = "Rejected"


class PaymentStatus(Enum):
    PAID = "Paid"
    PENDING = "Pending"


class OrderType(Enum):
    PREPAID = "Prepaid"
    COD = "Cod"
    PARTIAL_PAID = "PartialPaid"


# Forward edges only. Rejection is guarded separately by reject().
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.ALLOTTED_TO_VENDOR},
    OrderStatus.ALLOTTED_TO_VENDOR: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
    OrderStatus.REJECTED: set(),  # terminal
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REJECTED}

_STATUS_ALIASES = {"accepted": OrderStatus.PROCESSING}


def _normalize(value: str) -> str:
    return "".join(ch for ch in str(value).lower() if ch.isalnum())


def parse_order_status(value: str) -> OrderStatus:
    """Parse a status as typed by an admin ("shipped", "Allotted To Vendor", "Accepted")."""
    key = _normalize(value)
    if key in _STATUS_ALIASES:
        return _STATUS_ALIASES[key]
    for status in OrderStatus:
        if _normalize(status.value) == key:
            return status
    raise ValidationError({"status": [f"Unknown order status: {value!r}"]})


def parse_order_type(value: str) -> OrderType:
    """Parse an order type ("COD", "Partial Paid", "prepaid")."""
    key = _normalize(value)
    for order_type in OrderType:
        if _normalize(order_type.value) == key:
            return order_type
    raise ValidationError({"order_type": [f"Unknown order type: {value!r}"]})


def parse_payment_status(value: str) -> PaymentStatus:
    key = _normalize(value)
    for payment_status in PaymentStatus:
        if _normalize(payment_status.value) == key:
            return payment_status
    raise ValidationError({"payment_status": [f"Unknown payment status: {value!r}"]})


def _clean(text: str | None) -> str | None:
    return (text or "").strip() or None


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@backoffice.aggregate
class Order:
    order_id = Identifier(identifier=True, required=True)
    customer_name = String(max_length=200)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    order_type = String(choices=OrderType, required=True)
    items = Text()  # JSON list of line items, carried as-is
    total_amount = Float()
    vendor_allotment = ValueObject(VendorAllotment)
    courier_allotment = ValueObject(CourierAllotment)
    delivery_status = String(max_length=50)
    admin_notes = Text()  # internal, never shown to the customer
    rejection_reason = Text()
    placed_at = DateTime()
    last_updated = DateTime()

    @invariant.post
    def courier_requires_vendor(self):
        if self.courier_allotment and self.courier_allotment.is_allotted:
            if not (self.vendor_allotment and self.vendor_allotment.is_allotted):
                raise ValidationError({"courier_allotment": ["A courier cannot be allotted without an allotted vendor"]})

    @invariant.post
    def delivery_status_is_derived(self):
        if self.delivery_status != self._derived_delivery_status():
            raise ValidationError({"delivery_status": ["Delivery status is out of sync with status and allotment"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        order_id: str,
        order_type: str,
        payment_status: str = PaymentStatus.PENDING.value,
        customer_name: str | None = None,
        items_data: list[dict] | None = None,
        total_amount: float | None = None,
        placed_at: datetime | None = None,
    ):
        """Bring a checked-out order into the admin workflow as PENDING."""
        now = datetime.now(UTC)
        placed_at = placed_at or now
        items = json.dumps(items_data or [])
        order_type = parse_order_type(order_type).value
        vendor = allotment.unallotted_vendor()
        courier = allotment.unallotted_courier()

        order = cls(
            order_id=order_id,
            customer_name=customer_name,
            payment_status=payment_status,
            status=OrderStatus.PENDING.value,
            order_type=order_type,
            items=items,
            total_amount=total_amount,
            vendor_allotment=vendor,
            courier_allotment=courier,
            delivery_status=order_delivery_status(OrderStatus.PENDING.value, vendor.state, courier.state),
            placed_at=placed_at,
            last_updated=now,
        )
        order.raise_(
            OrderRegistered(
                order_id=order_id,
                customer_name=customer_name,
                order_type=order_type,
                payment_status=payment_status,
                items=items,
                total_amount=total_amount,
                placed_at=placed_at,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _derived_delivery_status(self) -> str:
        vendor_state = self.vendor_allotment.state if self.vendor_allotment else None
        courier_state = self.courier_allotment.state if self.courier_allotment else None
        return order_delivery_status(self.status, vendor_state, courier_state)

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if current in TERMINAL_STATUSES:
            raise IllegalTransition({"status": [f"Order is {current.value} and can no longer change status"]})
        if target_status not in _VALID_TRANSITIONS[current]:
            raise IllegalTransition({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_allotment_open(self) -> None:
        if self.is_terminal:
            raise IllegalTransition({"status": [f"Order is {self.status}; allotment can no longer change"]})

    def _move_to(self, target_status: OrderStatus, notes: str | None = None, reason: str | None = None) -> datetime:
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target_status.value
            self.delivery_status = self._derived_delivery_status()
            if notes:
                self.admin_notes = notes
            if reason:
                self.rejection_reason = reason
            self.last_updated = now
        return now

    # -------------------------------------------------------------------
    # Status state machine
    # -------------------------------------------------------------------
    def accept(self, notes: str | None = None) -> None:
        """Accept a pending order and start processing it."""
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise IllegalTransition({"status": [f"Only pending orders can be accepted (order is {self.status})"]})

        notes = _clean(notes)
        now = self._move_to(OrderStatus.PROCESSING, notes=notes)
        self.raise_(
            OrderAccepted(
                order_id=self.order_id,
                delivery_status=self.delivery_status,
                notes=notes,
                accepted_at=now,
            )
        )

    def reject(self, confirmed: bool = False, reason: str | None = None, notes: str | None = None) -> None:
        """Reject a pending order. The admin must have confirmed the rejection.

        `reason` is kept on the order and forwarded with the rejection
        notification; `notes` are internal.
        """
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise IllegalTransition({"status": [f"Only pending orders can be rejected (order is {self.status})"]})
        if not confirmed:
            raise ValidationError({"confirmed": ["Rejecting an order must be explicitly confirmed"]})

        reason, notes = _clean(reason), _clean(notes)
        now = self._move_to(OrderStatus.REJECTED, notes=notes, reason=reason)
        self.raise_(
            OrderRejected(
                order_id=self.order_id,
                delivery_status=self.delivery_status,
                reason=reason,
                notes=notes,
                rejected_at=now,
            )
        )

    def change_status(
        self,
        new_status: str,
        confirmed: bool = False,
        notes: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Move the order forward to `new_status` (administrative override).

        Rejection goes through the same guard as `reject()` whichever path
        requests it; `reason` only matters for that path.
        """
        target = parse_order_status(new_status)
        if target == OrderStatus.REJECTED:
            self.reject(confirmed=confirmed, reason=reason, notes=notes)
            return

        self._assert_can_transition(target)
        previous = self.status
        notes = _clean(notes)
        now = self._move_to(target, notes=notes)
        self.raise_(
            OrderStatusChanged(
                order_id=self.order_id,
                previous_status=previous,
                new_status=self.status,
                delivery_status=self.delivery_status,
                notes=notes,
                changed_at=now,
            )
        )

    def update_notes(self, notes: str | None) -> None:
        """Replace the internal notes. Allowed in every status, terminal ones included."""
        notes = _clean(notes)
        if notes == self.admin_notes:
            return

        now = datetime.now(UTC)
        with atomic_change(self):
            self.admin_notes = notes
            self.last_updated = now
        self.raise_(OrderNotesUpdated(order_id=self.order_id, notes=notes, updated_at=now))

    # -------------------------------------------------------------------
    # Allotment
    # -------------------------------------------------------------------
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
            OrderAllotmentChanged(
                order_id=self.order_id,
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
        """Open the vendor-selection step, or revoke the vendor (and courier)."""
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
        """Guard checked before the tracking provider is called."""
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
