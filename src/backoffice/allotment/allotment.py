"""Vendor and courier allotment — value objects and their transitions.

Both Orders and accepted Return/Exchange requests embed the same two value
objects. The transition helpers here are pure: they take the current value
objects and return replacements (value objects are immutable), raising a
workflow error when the move is not allowed. Aggregates call them and stay
responsible for persisting the result and re-deriving the delivery status.

Vendor:  NotAllotted → SelectionPending → Allotted, and back to NotAllotted
         on revocation (which also releases the courier).
Courier: NotAllotted ⇄ Allotted, only while the vendor is Allotted.
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from backoffice.domain import backoffice
from backoffice.errors import IllegalTransition, InvalidSelection, VendorNotAllotted


class VendorState(Enum):
    NOT_ALLOTTED = "NotAllotted"
    SELECTION_PENDING = "SelectionPending"
    ALLOTTED = "Allotted"


class CourierState(Enum):
    NOT_ALLOTTED = "NotAllotted"
    ALLOTTED = "Allotted"


@backoffice.value_object
class VendorAllotment:
    """Vendor assignment of a record.

    `selected_vendor` holds the admin's pending choice while the selection step
    is open; `vendor_name` is only set once the choice has been confirmed.
    """

    state = String(choices=VendorState, default=VendorState.NOT_ALLOTTED.value)
    selected_vendor = String(max_length=100)
    vendor_name = String(max_length=100)

    @invariant.post
    def vendor_name_present_only_when_allotted(self):
        allotted = self.state == VendorState.ALLOTTED.value
        if allotted != bool(self.vendor_name):
            raise ValidationError({"vendor_name": ["Vendor name must be set if and only if the vendor is allotted"]})

    @invariant.post
    def selection_only_while_pending(self):
        if self.selected_vendor and self.state != VendorState.SELECTION_PENDING.value:
            raise ValidationError({"selected_vendor": ["A vendor can only be selected while selection is pending"]})

    @property
    def is_allotted(self) -> bool:
        return self.state == VendorState.ALLOTTED.value


@backoffice.value_object
class CourierAllotment:
    """Courier assignment of a record, identified by the provider's tracking id."""

    state = String(choices=CourierState, default=CourierState.NOT_ALLOTTED.value)
    tracking_id = String(max_length=100)

    @invariant.post
    def tracking_id_present_only_when_allotted(self):
        allotted = self.state == CourierState.ALLOTTED.value
        if allotted != bool(self.tracking_id):
            raise ValidationError({"tracking_id": ["Tracking id must be set if and only if the courier is allotted"]})

    @property
    def is_allotted(self) -> bool:
        return self.state == CourierState.ALLOTTED.value


def unallotted_vendor() -> VendorAllotment:
    return VendorAllotment(state=VendorState.NOT_ALLOTTED.value)


def unallotted_courier() -> CourierAllotment:
    return CourierAllotment(state=CourierState.NOT_ALLOTTED.value)


# ---------------------------------------------------------------------------
# Vendor transitions
# ---------------------------------------------------------------------------
def open_vendor_selection(vendor: VendorAllotment) -> VendorAllotment:
    """Start the vendor-selection step. Re-opening a pending selection is a no-op."""
    current = VendorState(vendor.state)
    if current == VendorState.ALLOTTED:
        raise IllegalTransition(
            {"vendor_allotment": [f"Vendor {vendor.vendor_name!r} is already allotted; revoke the allotment first"]}
        )
    if current == VendorState.SELECTION_PENDING:
        return vendor
    return VendorAllotment(state=VendorState.SELECTION_PENDING.value)


def revoke_vendor() -> tuple[VendorAllotment, CourierAllotment]:
    """Clear the vendor allotment, releasing the courier along with it."""
    return unallotted_vendor(), unallotted_courier()


def select_vendor(vendor: VendorAllotment, vendor_name: str | None) -> VendorAllotment:
    """Record (or change) the pending vendor choice without confirming it."""
    if vendor.state != VendorState.SELECTION_PENDING.value:
        raise IllegalTransition(
            {"vendor_allotment": [f"Vendor can only be selected while selection is pending (state is {vendor.state})"]}
        )
    name = (vendor_name or "").strip()
    if not name:
        raise InvalidSelection({"vendor_name": ["A vendor must be chosen"]})
    return VendorAllotment(state=VendorState.SELECTION_PENDING.value, selected_vendor=name)


def confirm_vendor(vendor: VendorAllotment) -> VendorAllotment:
    if vendor.state != VendorState.SELECTION_PENDING.value:
        raise IllegalTransition(
            {"vendor_allotment": [f"There is no open vendor selection to confirm (state is {vendor.state})"]}
        )
    if not vendor.selected_vendor:
        raise InvalidSelection({"vendor_name": ["No vendor has been selected yet"]})
    return VendorAllotment(state=VendorState.ALLOTTED.value, vendor_name=vendor.selected_vendor)


# ---------------------------------------------------------------------------
# Courier transitions
# ---------------------------------------------------------------------------
def ensure_vendor_allotted(vendor: VendorAllotment) -> None:
    if not vendor.is_allotted:
        raise VendorNotAllotted({"courier_allotment": ["A vendor must be allotted before a courier"]})


def allot_courier(vendor: VendorAllotment, tracking_id: str) -> CourierAllotment:
    ensure_vendor_allotted(vendor)
    if not tracking_id:
        raise ValidationError({"tracking_id": ["A tracking id is required to allot a courier"]})
    return CourierAllotment(state=CourierState.ALLOTTED.value, tracking_id=tracking_id)


def release_courier(vendor: VendorAllotment) -> CourierAllotment:
    ensure_vendor_allotted(vendor)
    return unallotted_courier()
