"""Maps workflow errors onto HTTP responses with a tagged body."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from backoffice.errors import error_kind

logger = structlog.get_logger(__name__)

HTTP_STATUS = {
    "NotFound": 404,
    "IllegalTransition": 409,
    "VendorNotAllotted": 409,
    "ConcurrencyConflict": 409,
    "InvalidSelection": 422,
    "ExplanationRequired": 422,
    "ValidationError": 422,
    "TrackingUnavailable": 503,
}


def error_response(exc: Exception) -> JSONResponse:
    kind = error_kind(exc)
    messages = getattr(exc, "messages", None) or str(exc)
    return JSONResponse(status_code=HTTP_STATUS[kind], content={"error": kind, "messages": messages})


async def _workflow_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info("Request refused", path=request.url.path, error=error_kind(exc))
    return error_response(exc)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ObjectNotFoundError, _workflow_error_handler)
    app.add_exception_handler(ValidationError, _workflow_error_handler)
