import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from backoffice.notifications import get_notifier, reset_notifier
from backoffice.tracking import get_tracking_provider, reset_tracking_provider
from backoffice.vendors import reset_vendor_registry


@pytest.fixture(scope="session")
def backoffice_bed():
    from backoffice.domain import backoffice
    from backoffice.utils.db import drop_db, setup_db

    bed = DomainFixture(backoffice)
    bed.setup()
    setup_db(backoffice)
    yield bed
    drop_db(backoffice)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(backoffice_bed):
    reset_tracking_provider()
    reset_notifier()
    reset_vendor_registry()
    with backoffice_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def tracking():
    """The fake tracking provider used by courier allotment."""
    return get_tracking_provider()


@pytest.fixture()
def notifier():
    """The fake notifier that receives dispatched notifications."""
    return get_notifier()
