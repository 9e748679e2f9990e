"""Tests for Order registration and its invariants."""

import json
from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError

from backoffice.allotment.allotment import CourierAllotment, CourierState, VendorAllotment, VendorState
from backoffice.order.order import Order, OrderType, PaymentStatus, parse_order_type


class TestRegistration:
    def test_register_sets_defaults(self):
        order = Order.register(order_id="ord-001", order_type="Cod")
        assert order.status == "Pending"
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.vendor_allotment.state == VendorState.NOT_ALLOTTED.value
        assert order.courier_allotment.state == CourierState.NOT_ALLOTTED.value
        assert order.delivery_status == "Order Placed"
        assert order.placed_at is not None

    def test_register_keeps_placed_at(self):
        placed = datetime(2024, 3, 1, 10, 30, tzinfo=UTC)
        order = Order.register(order_id="ord-001", order_type="Prepaid", placed_at=placed)
        assert order.placed_at == placed

    def test_register_stores_items_as_json(self):
        items = [{"sku": "TSHIRT-M", "quantity": 2}]
        order = Order.register(order_id="ord-001", order_type="Prepaid", items_data=items)
        assert json.loads(order.items) == items

    @pytest.mark.parametrize(
        "raw, expected",
        [("COD", OrderType.COD), ("Partial Paid", OrderType.PARTIAL_PAID), ("prepaid", OrderType.PREPAID)],
    )
    def test_order_type_is_normalized(self, raw, expected):
        assert parse_order_type(raw) == expected
        assert Order.register(order_id="ord-001", order_type=raw).order_type == expected.value

    def test_unknown_order_type(self):
        with pytest.raises(ValidationError) as exc:
            Order.register(order_id="ord-001", order_type="Barter")
        assert "order_type" in exc.value.messages

    def test_unknown_payment_status(self):
        with pytest.raises(ValidationError):
            Order.register(order_id="ord-001", order_type="Prepaid", payment_status="Maybe")


class TestInvariants:
    def test_courier_without_vendor_is_rejected(self):
        with pytest.raises(ValidationError):
            Order(
                order_id="ord-001",
                order_type="Prepaid",
                status="Processing",
                vendor_allotment=VendorAllotment(state="NotAllotted"),
                courier_allotment=CourierAllotment(state="Allotted", tracking_id="SP0000000001"),
                delivery_status="Pending Shipment",
            )

    def test_delivery_status_cannot_be_set_independently(self):
        order = Order.register(order_id="ord-001", order_type="Prepaid")
        with pytest.raises(ValidationError):
            order.delivery_status = "In Transit"
