"""Opening Return and Exchange requests against an existing order."""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from backoffice.aftersales.request import AfterSalesRequest, RequestKind
from backoffice.domain import backoffice
from backoffice.order.order import Order

logger = structlog.get_logger(__name__)


@backoffice.command(part_of="AfterSalesRequest")
class OpenReturnRequest:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=100)
    request_id = Identifier()
    requested_at = DateTime()


@backoffice.command(part_of="AfterSalesRequest")
class OpenExchangeRequest:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=100)
    request_id = Identifier()
    requested_at = DateTime()


@backoffice.command_handler(part_of=AfterSalesRequest)
class OpenRequestHandler:
    def _open(self, kind: RequestKind, command):
        # Unknown orders surface as ObjectNotFoundError
        order = current_domain.repository_for(Order).get(command.order_id)

        request = AfterSalesRequest.open(
            kind=kind.value,
            order_id=order.order_id,
            order_type=order.order_type,
            reason=command.reason,
            request_id=command.request_id,
            requested_at=command.requested_at,
        )
        current_domain.repository_for(AfterSalesRequest).add(request)
        logger.info(
            "After-sales request opened",
            request_id=request.request_id,
            kind=request.kind,
            order_id=request.order_id,
            reason=request.reason,
        )
        return request.to_dict()

    @handle(OpenReturnRequest)
    def open_return(self, command):
        return self._open(RequestKind.RETURN, command)

    @handle(OpenExchangeRequest)
    def open_exchange(self, command):
        return self._open(RequestKind.EXCHANGE, command)
