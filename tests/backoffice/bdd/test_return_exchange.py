"""BDD tests for Return/Exchange decisions."""

from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from backoffice.aftersales.request import EXCHANGE_REASONS, RETURN_REASONS, AfterSalesRequest

scenarios("features/return_exchange.feature")

_FIRST_REASON = {"Return": RETURN_REASONS[0], "Exchange": EXCHANGE_REASONS[0]}


@given(parsers.cfparse('a pending "{kind}" request'), target_fixture="request_")
def pending_request(kind):
    request = AfterSalesRequest.open(
        kind=kind,
        order_id="ord-bdd-010",
        order_type="Prepaid",
        reason=_FIRST_REASON[kind],
        request_id=f"{kind[:3].upper()}-BDD-1",
    )
    request._events.clear()
    return request


def _reject(request_, explanation, error):
    try:
        request_.decide("Rejected", explanation)
    except ValidationError as exc:
        error["exc"] = exc
    return request_


@when(parsers.cfparse('the request is rejected with explanation "{explanation}"'), target_fixture="request_")
def reject_request(request_, explanation, error):
    return _reject(request_, explanation, error)


@when("the request is rejected without an explanation", target_fixture="request_")
def reject_request_without_explanation(request_, error):
    return _reject(request_, "", error)


@when("the request is accepted", target_fixture="request_")
def accept_request(request_):
    request_.decide("Accepted")
    return request_


@when("vendor selection is attempted on the request", target_fixture="request_")
def attempt_vendor_selection(request_, error):
    try:
        request_.set_vendor_allotment(True)
    except ValidationError as exc:
        error["exc"] = exc
    return request_


@then(parsers.cfparse('the decision status is "{decision}"'))
def decision_status_is(request_, decision):
    assert request_.decision_status == decision


@then(parsers.cfparse('the request delivery status is "{delivery_status}"'))
def request_delivery_status_is(request_, delivery_status):
    assert request_.delivery_status == delivery_status
