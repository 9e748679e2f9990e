"""Backoffice API package."""

from backoffice.api.errors import install_error_handlers
from backoffice.api.routes import exchanges_router, order_router, returns_router, vendor_router

__all__ = ["order_router", "returns_router", "exchanges_router", "vendor_router", "install_error_handlers"]
