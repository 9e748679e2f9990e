from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from backoffice.aftersales.request import AfterSalesRequest
from backoffice.errors import check_version


def load_request(request_id: str, kind: str, expected_version: int | None = None):
    """Fetch a request of the given kind; an id of the other kind does not exist."""
    repo = current_domain.repository_for(AfterSalesRequest)
    request = repo.get(request_id)
    if request.kind != kind:
        raise ObjectNotFoundError(f"{kind} request with identifier {request_id} does not exist.")
    check_version(request, expected_version)
    return repo, request
