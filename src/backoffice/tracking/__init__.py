"""Tracking provider registry — pluggable courier tracking-id issuance."""

import os

_provider_instance = None


def get_tracking_provider():
    """Return the configured tracking provider (singleton).

    Uses FakeTrackingProvider by default. Select another adapter through the
    TRACKING_PROVIDER environment variable.
    """
    global _provider_instance
    if _provider_instance is None:
        adapter = os.environ.get("TRACKING_PROVIDER", "fake")
        if adapter == "fake":
            from backoffice.tracking.fake_adapter import FakeTrackingProvider

            _provider_instance = FakeTrackingProvider()
        else:
            raise ValueError(f"Unknown tracking provider: {adapter}")
    return _provider_instance


def reset_tracking_provider():
    """Reset the provider singleton (useful for testing)."""
    global _provider_instance
    _provider_instance = None
