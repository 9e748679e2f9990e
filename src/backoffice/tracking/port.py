"""Tracking provider port — abstract interface for courier tracking-id issuance.

The allotment workflow only needs one thing from a courier integration: an
opaque tracking id for a record. Adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod


class TrackingProviderPort(ABC):
    """Abstract interface for tracking providers."""

    @abstractmethod
    def generate_tracking_id(self, record_id: str) -> dict:
        """Request a tracking id for the given order/return/exchange.

        Returns:
            dict with key tracking_id on success, or tracking_id=None and
            error (str) on failure.
        """
        ...
