"""BDD tests for order acceptance and allotment."""

from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_fulfillment.feature")


@when("the order is accepted", target_fixture="order")
def accept_order(order):
    order.accept()
    return order


@when("vendor selection is opened", target_fixture="order")
def open_vendor_selection(order):
    order.set_vendor_allotment(True)
    return order


@when(parsers.cfparse('vendor "{vendor}" is selected'), target_fixture="order")
def select_vendor(order, vendor):
    order.select_vendor(vendor)
    return order


@when("the vendor is confirmed", target_fixture="order")
def confirm_vendor(order):
    order.confirm_vendor()
    return order


@given(parsers.cfparse('a courier is allotted with tracking id "{tracking_id}"'), target_fixture="order")
@when(parsers.cfparse('a courier is allotted with tracking id "{tracking_id}"'), target_fixture="order")
def allot_courier(order, tracking_id):
    order.set_courier_allotment(True, tracking_id=tracking_id)
    return order


@when("the vendor allotment is revoked", target_fixture="order")
def revoke_vendor(order):
    order.set_vendor_allotment(False)
    return order


@when("a courier allotment is attempted", target_fixture="order")
def attempt_courier(order, error):
    try:
        order.ensure_courier_allottable()
    except ValidationError as exc:
        error["exc"] = exc
    return order


@when("rejection of the order is attempted", target_fixture="order")
def attempt_rejection(order, error):
    try:
        order.reject(confirmed=True)
    except ValidationError as exc:
        error["exc"] = exc
    return order


@then(parsers.cfparse('the vendor state is "{state}"'))
def vendor_state_is(order, state):
    assert order.vendor_allotment.state == state


@then(parsers.cfparse('the vendor name is "{name}"'))
def vendor_name_is(order, name):
    assert order.vendor_allotment.vendor_name == name


@then(parsers.cfparse('the courier state is "{state}"'))
def courier_state_is(order, state):
    assert order.courier_allotment.state == state


@then("the order has no tracking id")
def no_tracking_id(order):
    assert order.courier_allotment.tracking_id is None
