"""Shared BDD fixtures and step definitions for the backoffice domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from backoffice.errors import error_kind
from backoffice.order.order import Order


@pytest.fixture()
def error():
    """Container for captured workflow errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending order", target_fixture="order")
def pending_order():
    order = Order.register(order_id="ord-bdd-001", order_type="Prepaid", customer_name="Devika")
    order._events.clear()
    return order


@given("an accepted order", target_fixture="order")
def accepted_order():
    order = Order.register(order_id="ord-bdd-002", order_type="Cod")
    order.accept()
    order._events.clear()
    return order


@given(parsers.cfparse('an accepted order with vendor "{vendor}"'), target_fixture="order")
def order_with_vendor(vendor):
    order = Order.register(order_id="ord-bdd-003", order_type="Prepaid")
    order.accept()
    order.set_vendor_allotment(True)
    order.select_vendor(vendor)
    order.confirm_vendor()
    order._events.clear()
    return order


@given("a delivered order", target_fixture="order")
def delivered_order():
    order = Order.register(order_id="ord-bdd-004", order_type="Prepaid")
    order.accept()
    for status in ("AllottedToVendor", "Shipped", "Delivered"):
        order.change_status(status)
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the action fails with "{kind}"'))
def action_fails(error, kind):
    assert isinstance(error["exc"], ValidationError)
    assert error_kind(error["exc"]) == kind


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the delivery status is "{delivery_status}"'))
def delivery_status_is(order, delivery_status):
    assert order.delivery_status == delivery_status
