"""Application tests for order registration and status commands via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from backoffice.errors import ConcurrencyConflict, IllegalTransition
from backoffice.order.order import Order, OrderStatus
from backoffice.order.registration import RegisterOrder
from backoffice.order.status import AcceptOrder, ChangeOrderStatus, RejectOrder, UpdateOrderNotes


def _register(order_id="ord-001", order_type="Prepaid", **overrides):
    return current_domain.process(
        RegisterOrder(
            order_id=order_id,
            order_type=order_type,
            customer_name=overrides.pop("customer_name", "Meera"),
            items=json.dumps(overrides.pop("items", [{"sku": "KURTA-L", "quantity": 1}])),
            **overrides,
        ),
        asynchronous=False,
    )


def _get(order_id="ord-001"):
    return current_domain.repository_for(Order).get(order_id)


class TestRegisterOrder:
    def test_register_persists_pending_order(self):
        result = _register()
        assert result["order_id"] == "ord-001"
        order = _get()
        assert order.status == OrderStatus.PENDING.value
        assert order.delivery_status == "Order Placed"
        assert json.loads(order.items) == [{"sku": "KURTA-L", "quantity": 1}]

    def test_register_stores_event(self):
        _register()
        messages = current_domain.event_store.store.read("backoffice::order")
        assert any(
            m.metadata and m.metadata.headers and m.metadata.headers.type == "Backoffice.OrderRegistered.v1"
            for m in messages
        )

    def test_duplicate_registration(self):
        _register()
        with pytest.raises(ValidationError) as exc:
            _register()
        assert "order_id" in exc.value.messages

    def test_order_type_is_required(self):
        with pytest.raises(ValidationError):
            current_domain.process(RegisterOrder(order_id="ord-002"), asynchronous=False)

    @pytest.mark.parametrize("items", ["not json", '{"sku": "KURTA-L"}'])
    def test_malformed_items_are_a_validation_error(self, items):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                RegisterOrder(order_id="ord-003", order_type="Prepaid", items=items),
                asynchronous=False,
            )
        assert exc.value.messages["items"] == ["Items must be a JSON list"]
        with pytest.raises(ObjectNotFoundError):
            _get("ord-003")


class TestAcceptOrder:
    def test_accept(self):
        _register()
        result = current_domain.process(AcceptOrder(order_id="ord-001"), asynchronous=False)
        assert result["status"] == OrderStatus.PROCESSING.value
        assert result["delivery_status"] == "Pending Shipment"
        assert _get().status == OrderStatus.PROCESSING.value

    def test_accept_raises_event(self):
        _register()
        current_domain.process(AcceptOrder(order_id="ord-001"), asynchronous=False)
        messages = current_domain.event_store.store.read("backoffice::order")
        assert any(
            m.metadata and m.metadata.headers and m.metadata.headers.type == "Backoffice.OrderAccepted.v1"
            for m in messages
        )

    def test_accept_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(AcceptOrder(order_id="does-not-exist"), asynchronous=False)


class TestRejectOrder:
    def test_reject_with_confirmation(self):
        _register()
        current_domain.process(RejectOrder(order_id="ord-001", confirmed=True), asynchronous=False)
        assert _get().status == OrderStatus.REJECTED.value

    def test_reject_without_confirmation_changes_nothing(self):
        _register()
        with pytest.raises(ValidationError):
            current_domain.process(RejectOrder(order_id="ord-001"), asynchronous=False)
        assert _get().status == OrderStatus.PENDING.value


class TestChangeOrderStatus:
    def test_walk_to_delivered(self):
        _register()
        current_domain.process(AcceptOrder(order_id="ord-001"), asynchronous=False)
        for status in ("AllottedToVendor", "Shipped", "Delivered"):
            current_domain.process(ChangeOrderStatus(order_id="ord-001", new_status=status), asynchronous=False)
        order = _get()
        assert order.status == OrderStatus.DELIVERED.value
        assert order.delivery_status == "Delivered"

    def test_illegal_transition_leaves_record_unchanged(self):
        _register()
        before = _get().to_dict()
        with pytest.raises(IllegalTransition):
            current_domain.process(ChangeOrderStatus(order_id="ord-001", new_status="Delivered"), asynchronous=False)
        assert _get().to_dict() == before


class TestAdminNotes:
    def test_accept_keeps_notes(self):
        _register()
        current_domain.process(AcceptOrder(order_id="ord-001", notes="  Verified by phone "), asynchronous=False)
        assert _get().admin_notes == "Verified by phone"

    def test_reject_keeps_reason_and_notes(self):
        _register()
        current_domain.process(
            RejectOrder(order_id="ord-001", confirmed=True, reason="Address unverifiable", notes="Two failed calls"),
            asynchronous=False,
        )
        order = _get()
        assert order.rejection_reason == "Address unverifiable"
        assert order.admin_notes == "Two failed calls"

    def test_reason_travels_with_status_change_to_rejected(self):
        _register()
        current_domain.process(
            ChangeOrderStatus(order_id="ord-001", new_status="Rejected", confirmed=True, reason="Duplicate order"),
            asynchronous=False,
        )
        assert _get().rejection_reason == "Duplicate order"

    def test_status_change_without_notes_keeps_earlier_notes(self):
        _register()
        current_domain.process(AcceptOrder(order_id="ord-001", notes="Priority customer"), asynchronous=False)
        current_domain.process(
            ChangeOrderStatus(order_id="ord-001", new_status="AllottedToVendor"), asynchronous=False
        )
        assert _get().admin_notes == "Priority customer"

    def test_rejected_event_carries_reason(self):
        _register()
        current_domain.process(
            RejectOrder(order_id="ord-001", confirmed=True, reason="Out of stock"), asynchronous=False
        )
        messages = current_domain.event_store.store.read("backoffice::order")
        rejected = [
            m
            for m in messages
            if m.metadata and m.metadata.headers and m.metadata.headers.type == "Backoffice.OrderRejected.v1"
        ]
        assert len(rejected) == 1
        assert rejected[0].data["reason"] == "Out of stock"

    def test_update_notes_on_a_terminal_order(self):
        _register()
        current_domain.process(RejectOrder(order_id="ord-001", confirmed=True), asynchronous=False)
        result = current_domain.process(
            UpdateOrderNotes(order_id="ord-001", notes="Customer informed"), asynchronous=False
        )
        assert result["admin_notes"] == "Customer informed"
        assert _get().status == OrderStatus.REJECTED.value

    def test_clearing_notes(self):
        _register()
        current_domain.process(UpdateOrderNotes(order_id="ord-001", notes="Fragile"), asynchronous=False)
        current_domain.process(UpdateOrderNotes(order_id="ord-001", notes=""), asynchronous=False)
        assert _get().admin_notes is None


class TestOptimisticConcurrency:
    def test_matching_version_is_accepted(self):
        _register()
        version = _get()._version
        current_domain.process(AcceptOrder(order_id="ord-001", expected_version=version), asynchronous=False)
        assert _get().status == OrderStatus.PROCESSING.value

    def test_stale_version_is_a_conflict(self):
        _register()
        stale = _get()._version
        current_domain.process(AcceptOrder(order_id="ord-001"), asynchronous=False)
        with pytest.raises(ConcurrencyConflict):
            current_domain.process(
                ChangeOrderStatus(order_id="ord-001", new_status="AllottedToVendor", expected_version=stale),
                asynchronous=False,
            )
        assert _get().status == OrderStatus.PROCESSING.value
