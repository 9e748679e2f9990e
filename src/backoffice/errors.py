"""Error taxonomy for the backoffice workflow.

Every failure the workflow can report is one of the kinds below. They extend
Protean's ValidationError so that aggregates raise them exactly like any other
domain validation failure (`raise IllegalTransition({"status": [...]})`), while
the API layer can still tell them apart through the `kind` tag.

Unknown ids surface as `protean.exceptions.ObjectNotFoundError` (kind
"NotFound"); plain `ValidationError` is the "ValidationError" kind.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class WorkflowError(ValidationError):
    kind = "ValidationError"


class IllegalTransition(WorkflowError):
    """The requested status, decision or allotment change is not permitted."""

    kind = "IllegalTransition"


class VendorNotAllotted(WorkflowError):
    """A courier cannot be allotted before a vendor has been confirmed."""

    kind = "VendorNotAllotted"


class InvalidSelection(WorkflowError):
    """A vendor cannot be confirmed without a (non-blank) selection."""

    kind = "InvalidSelection"


class ExplanationRequired(WorkflowError):
    """A rejection decision was submitted with a blank explanation."""

    kind = "ExplanationRequired"


class ConcurrencyConflict(WorkflowError):
    """The record changed since the caller last read it."""

    kind = "ConcurrencyConflict"


class TrackingUnavailable(WorkflowError):
    """The tracking provider could not issue a tracking id."""

    kind = "TrackingUnavailable"


def error_kind(exc: Exception) -> str:
    """Return the taxonomy tag for an exception raised by the workflow."""
    if isinstance(exc, ObjectNotFoundError):
        return "NotFound"
    if isinstance(exc, WorkflowError):
        return exc.kind
    if isinstance(exc, ValidationError):
        return "ValidationError"
    raise TypeError(f"{type(exc).__name__} is not a workflow error")


def check_version(record, expected_version: int | None) -> None:
    """Reject the operation when the caller's view of the record is stale."""
    if expected_version is None:
        return
    if record._version != expected_version:
        raise ConcurrencyConflict(
            {
                "_version": [
                    f"Record was modified concurrently (expected version {expected_version}, "
                    f"found {record._version})"
                ]
            }
        )
