"""Order allotment — vendor selection/confirmation and courier allotment commands."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from backoffice.allotment.courier import issue_tracking_id
from backoffice.domain import backoffice
from backoffice.errors import check_version
from backoffice.order.order import Order

logger = structlog.get_logger(__name__)


@backoffice.command(part_of="Order")
class SetVendorAllotment:
    """Open vendor selection (allot=True) or revoke the vendor and courier (allot=False)."""

    order_id = Identifier(required=True)
    allot = Boolean(required=True)
    expected_version = Integer()


@backoffice.command(part_of="Order")
class SelectVendor:
    order_id = Identifier(required=True)
    vendor_name = String(max_length=100)
    expected_version = Integer()


@backoffice.command(part_of="Order")
class ConfirmVendor:
    order_id = Identifier(required=True)
    expected_version = Integer()


@backoffice.command(part_of="Order")
class SetCourierAllotment:
    """Allot a courier (issuing a tracking id) or release it."""

    order_id = Identifier(required=True)
    allot = Boolean(required=True)
    expected_version = Integer()


@backoffice.command_handler(part_of=Order)
class OrderAllotmentHandler:
    def _load(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        check_version(order, command.expected_version)
        return repo, order

    @handle(SetVendorAllotment)
    def set_vendor_allotment(self, command):
        repo, order = self._load(command)
        order.set_vendor_allotment(command.allot)
        repo.add(order)
        logger.info("Order vendor allotment toggled", order_id=order.order_id, allot=command.allot)
        return order.to_dict()

    @handle(SelectVendor)
    def select_vendor(self, command):
        repo, order = self._load(command)
        order.select_vendor(command.vendor_name)
        repo.add(order)
        return order.to_dict()

    @handle(ConfirmVendor)
    def confirm_vendor(self, command):
        repo, order = self._load(command)
        order.confirm_vendor()
        repo.add(order)
        logger.info("Vendor allotted to order", order_id=order.order_id, vendor=order.vendor_allotment.vendor_name)
        return order.to_dict()

    @handle(SetCourierAllotment)
    def set_courier_allotment(self, command):
        repo, order = self._load(command)
        order.ensure_courier_allottable()

        tracking_id = None
        if command.allot and not order.courier_allotment.is_allotted:
            tracking_id = issue_tracking_id(order.order_id)

        order.set_courier_allotment(command.allot, tracking_id=tracking_id)
        repo.add(order)
        logger.info(
            "Order courier allotment toggled",
            order_id=order.order_id,
            allot=command.allot,
            tracking_id=order.courier_allotment.tracking_id,
        )
        return order.to_dict()
