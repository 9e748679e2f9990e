"""Backoffice FastAPI application.

Admin console API over the fulfillment workflow. Commands are processed
synchronously via HTTP; every request runs inside the backoffice domain
context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (notification handlers fire in UoW)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from backoffice.domain import backoffice  # noqa: E402
from backoffice.utils.logging import bind_admin_context, clear_admin_context  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

backoffice.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Backoffice API",
    description="E-commerce admin console — order fulfillment, returns and exchanges",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_DOMAIN_PREFIXES = ("/orders", "/returns", "/exchanges", "/vendors")


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the backoffice domain context for workflow routes."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        clear_admin_context()
        bind_admin_context(
            admin_id=request.headers.get("x-admin-id", "anonymous"),
            method=request.method,
            path=request.url.path,
        )
        with backoffice.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from backoffice.api import (  # noqa: E402
    exchanges_router,
    install_error_handlers,
    order_router,
    returns_router,
    vendor_router,
)

app.include_router(order_router)
app.include_router(returns_router)
app.include_router(exchanges_router)
app.include_router(vendor_router)
install_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domains": {"backoffice": {"name": backoffice.name}}})
