"""Application tests for vendor/courier allotment of orders, including the tracking provider."""

import pytest
from protean import current_domain

from backoffice.errors import IllegalTransition, InvalidSelection, TrackingUnavailable, VendorNotAllotted
from backoffice.order.allotment import ConfirmVendor, SelectVendor, SetCourierAllotment, SetVendorAllotment
from backoffice.order.order import Order
from backoffice.order.registration import RegisterOrder
from backoffice.order.status import AcceptOrder, RejectOrder


def _processing_order(order_id="ord-001"):
    current_domain.process(RegisterOrder(order_id=order_id, order_type="Prepaid"), asynchronous=False)
    current_domain.process(AcceptOrder(order_id=order_id), asynchronous=False)
    return order_id


def _allot_vendor(order_id, vendor="ven 2"):
    current_domain.process(SetVendorAllotment(order_id=order_id, allot=True), asynchronous=False)
    current_domain.process(SelectVendor(order_id=order_id, vendor_name=vendor), asynchronous=False)
    return current_domain.process(ConfirmVendor(order_id=order_id), asynchronous=False)


def _get(order_id="ord-001"):
    return current_domain.repository_for(Order).get(order_id)


class TestVendorCommands:
    def test_vendor_flow(self):
        order_id = _processing_order()
        result = _allot_vendor(order_id)
        assert result["vendor_allotment"]["state"] == "Allotted"
        assert result["vendor_allotment"]["vendor_name"] == "ven 2"
        assert _get().vendor_allotment.vendor_name == "ven 2"

    def test_confirm_without_selection(self):
        order_id = _processing_order()
        current_domain.process(SetVendorAllotment(order_id=order_id, allot=True), asynchronous=False)
        with pytest.raises(InvalidSelection):
            current_domain.process(ConfirmVendor(order_id=order_id), asynchronous=False)
        assert _get().vendor_allotment.state == "SelectionPending"

    def test_allotment_on_rejected_order(self):
        current_domain.process(RegisterOrder(order_id="ord-009", order_type="Cod"), asynchronous=False)
        current_domain.process(RejectOrder(order_id="ord-009", confirmed=True), asynchronous=False)
        with pytest.raises(IllegalTransition):
            current_domain.process(SetVendorAllotment(order_id="ord-009", allot=True), asynchronous=False)


class TestCourierCommands:
    def test_courier_gets_tracking_id_from_provider(self, tracking):
        order_id = _processing_order()
        _allot_vendor(order_id)
        result = current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        assert result["courier_allotment"]["state"] == "Allotted"
        assert result["courier_allotment"]["tracking_id"] == "SP0000000001"
        assert result["delivery_status"] == "Shipped"
        assert tracking.issued == [(order_id, "SP0000000001")]

    def test_courier_before_vendor_does_not_call_provider(self, tracking):
        order_id = _processing_order()
        with pytest.raises(VendorNotAllotted):
            current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        assert tracking.issued == []

    def test_provider_failure_leaves_record_unchanged(self, tracking):
        order_id = _processing_order()
        _allot_vendor(order_id)
        before = _get().to_dict()

        tracking.configure(should_succeed=False, failure_reason="Courier API timeout")
        with pytest.raises(TrackingUnavailable) as exc:
            current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)

        assert "Courier API timeout" in exc.value.messages["courier_allotment"]
        assert _get().to_dict() == before

    def test_allotting_an_allotted_courier_does_not_reissue(self, tracking):
        order_id = _processing_order()
        _allot_vendor(order_id)
        current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        assert len(tracking.issued) == 1
        assert _get().courier_allotment.tracking_id == "SP0000000001"

    def test_release_courier(self):
        order_id = _processing_order()
        _allot_vendor(order_id)
        current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        result = current_domain.process(SetCourierAllotment(order_id=order_id, allot=False), asynchronous=False)
        assert result["courier_allotment"]["state"] == "NotAllotted"
        assert result["courier_allotment"]["tracking_id"] is None
        assert result["delivery_status"] == "Pending Shipment"

    def test_revoking_vendor_cascades_to_courier(self):
        order_id = _processing_order()
        _allot_vendor(order_id)
        current_domain.process(SetCourierAllotment(order_id=order_id, allot=True), asynchronous=False)
        current_domain.process(SetVendorAllotment(order_id=order_id, allot=False), asynchronous=False)
        order = _get()
        assert order.vendor_allotment.state == "NotAllotted"
        assert order.courier_allotment.state == "NotAllotted"
        assert order.courier_allotment.tracking_id is None
