"""Bulk status change — one status change per order, each in its own unit of work.

A failing order does not stop the batch and is left exactly as it was.
"""

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from backoffice.errors import error_kind
from backoffice.order.status import ChangeOrderStatus

logger = structlog.get_logger(__name__)


def bulk_change_status(order_ids: list[str], new_status: str, confirmed: bool = False) -> list[dict]:
    """Apply `new_status` to every order and report a per-order outcome."""
    outcomes = []
    for order_id in order_ids:
        try:
            record = current_domain.process(
                ChangeOrderStatus(order_id=order_id, new_status=new_status, confirmed=confirmed),
                asynchronous=False,
            )
        except (ObjectNotFoundError, ValidationError) as exc:
            outcomes.append(
                {"order_id": order_id, "ok": False, "error": error_kind(exc), "messages": _messages(exc)}
            )
            continue
        outcomes.append(
            {"order_id": order_id, "ok": True, "status": record["status"], "delivery_status": record["delivery_status"]}
        )

    logger.info(
        "Bulk status change applied",
        new_status=new_status,
        requested=len(order_ids),
        succeeded=sum(1 for o in outcomes if o["ok"]),
    )
    return outcomes


def _messages(exc: Exception):
    return getattr(exc, "messages", None) or str(exc)
