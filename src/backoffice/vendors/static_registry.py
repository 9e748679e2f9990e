"""A fixed list of vendors, overridable through BACKOFFICE_VENDORS."""

import os

from backoffice.vendors.port import VendorRegistryPort

DEFAULT_VENDORS = ("ven 1", "ven 2", "ven 3")


class StaticVendorRegistry(VendorRegistryPort):
    """Serves BACKOFFICE_VENDORS (comma-separated) or the default vendor list."""

    def __init__(self, vendors: list[str] | None = None):
        if vendors is None:
            configured = os.environ.get("BACKOFFICE_VENDORS", "")
            vendors = [v.strip() for v in configured.split(",") if v.strip()] or list(DEFAULT_VENDORS)
        self._vendors = list(vendors)

    def list_vendors(self) -> list[str]:
        return list(self._vendors)
