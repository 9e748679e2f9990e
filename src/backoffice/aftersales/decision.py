"""Admin decisions on Return and Exchange requests."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text

from backoffice.aftersales.lookup import load_request
from backoffice.aftersales.request import AfterSalesRequest, RequestKind
from backoffice.domain import backoffice

logger = structlog.get_logger(__name__)


@backoffice.command(part_of="AfterSalesRequest")
class DecideReturn:
    """Accept or reject a return. Rejections need an explanation."""

    request_id = Identifier(required=True)
    decision = String(required=True, max_length=20)
    explanation = Text()
    expected_version = Integer()


@backoffice.command(part_of="AfterSalesRequest")
class DecideExchange:
    """Accept or reject an exchange. Rejections need an explanation."""

    request_id = Identifier(required=True)
    decision = String(required=True, max_length=20)
    explanation = Text()
    expected_version = Integer()


@backoffice.command_handler(part_of=AfterSalesRequest)
class DecisionHandler:
    def _decide(self, kind: RequestKind, command):
        repo, request = load_request(command.request_id, kind.value, command.expected_version)
        request.decide(command.decision, command.explanation)
        repo.add(request)
        logger.info(
            "After-sales request decided",
            request_id=request.request_id,
            kind=request.kind,
            decision=request.decision_status,
        )
        return request.to_dict()

    @handle(DecideReturn)
    def decide_return(self, command):
        return self._decide(RequestKind.RETURN, command)

    @handle(DecideExchange)
    def decide_exchange(self, command):
        return self._decide(RequestKind.EXCHANGE, command)
