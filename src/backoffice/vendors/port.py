"""Vendor registry port — where the selectable fulfillment vendors come from."""

from abc import ABC, abstractmethod


class VendorRegistryPort(ABC):
    @abstractmethod
    def list_vendors(self) -> list[str]:
        """Return the vendor names an admin may pick from, in display order."""
        ...
