"""Notification port — abstract interface for informing customers and staff."""

from abc import ABC, abstractmethod


class NotificationPort(ABC):
    """Abstract interface for notification dispatch adapters."""

    @abstractmethod
    def notify(self, topic: str, record_id: str, payload: dict) -> dict:
        """Dispatch a notification about a record.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
