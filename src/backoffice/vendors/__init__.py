"""Vendor registry access (singleton per process)."""

import os

_registry_instance = None


def get_vendor_registry():
    """Return the configured vendor registry, selected by VENDOR_REGISTRY (default "static")."""
    global _registry_instance
    if _registry_instance is None:
        adapter = os.environ.get("VENDOR_REGISTRY", "static")
        if adapter == "static":
            from backoffice.vendors.static_registry import StaticVendorRegistry

            _registry_instance = StaticVendorRegistry()
        else:
            raise ValueError(f"Unknown vendor registry: {adapter}")
    return _registry_instance


def reset_vendor_registry():
    global _registry_instance
    _registry_instance = None


def list_vendors() -> list[str]:
    """Vendor names selectable in the allotment step."""
    return get_vendor_registry().list_vendors()
