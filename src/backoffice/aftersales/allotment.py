"""Vendor and courier allotment of accepted Return/Exchange requests.

Every command names the request kind it addresses; the Returns and
Exchanges tabs never reach each other's records.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String

from backoffice.aftersales.lookup import load_request
from backoffice.aftersales.request import AfterSalesRequest, RequestKind
from backoffice.allotment.courier import issue_tracking_id
from backoffice.domain import backoffice

logger = structlog.get_logger(__name__)


@backoffice.command(part_of="AfterSalesRequest")
class SetRequestVendorAllotment:
    request_id = Identifier(required=True)
    kind = String(required=True, choices=RequestKind)
    allot = Boolean(required=True)
    expected_version = Integer()


@backoffice.command(part_of="AfterSalesRequest")
class SelectRequestVendor:
    request_id = Identifier(required=True)
    kind = String(required=True, choices=RequestKind)
    vendor_name = String(max_length=100)
    expected_version = Integer()


@backoffice.command(part_of="AfterSalesRequest")
class ConfirmRequestVendor:
    request_id = Identifier(required=True)
    kind = String(required=True, choices=RequestKind)
    expected_version = Integer()


@backoffice.command(part_of="AfterSalesRequest")
class SetRequestCourierAllotment:
    request_id = Identifier(required=True)
    kind = String(required=True, choices=RequestKind)
    allot = Boolean(required=True)
    expected_version = Integer()


@backoffice.command_handler(part_of=AfterSalesRequest)
class RequestAllotmentHandler:
    @handle(SetRequestVendorAllotment)
    def set_vendor_allotment(self, command):
        repo, request = load_request(command.request_id, command.kind, command.expected_version)
        request.set_vendor_allotment(command.allot)
        repo.add(request)
        logger.info("Request vendor allotment toggled", request_id=request.request_id, allot=command.allot)
        return request.to_dict()

    @handle(SelectRequestVendor)
    def select_vendor(self, command):
        repo, request = load_request(command.request_id, command.kind, command.expected_version)
        request.select_vendor(command.vendor_name)
        repo.add(request)
        return request.to_dict()

    @handle(ConfirmRequestVendor)
    def confirm_vendor(self, command):
        repo, request = load_request(command.request_id, command.kind, command.expected_version)
        request.confirm_vendor()
        repo.add(request)
        logger.info(
            "Vendor allotted to request",
            request_id=request.request_id,
            vendor=request.vendor_allotment.vendor_name,
        )
        return request.to_dict()

    @handle(SetRequestCourierAllotment)
    def set_courier_allotment(self, command):
        repo, request = load_request(command.request_id, command.kind, command.expected_version)
        request.ensure_courier_allottable()

        tracking_id = None
        if command.allot and not request.courier_allotment.is_allotted:
            tracking_id = issue_tracking_id(request.request_id)

        request.set_courier_allotment(command.allot, tracking_id=tracking_id)
        repo.add(request)
        logger.info(
            "Request courier allotment toggled",
            request_id=request.request_id,
            allot=command.allot,
            tracking_id=request.courier_allotment.tracking_id,
        )
        return request.to_dict()
