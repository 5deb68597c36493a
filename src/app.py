"""FreshCart FastAPI application.

Grocery storefront backend serving two domains over JSON and cookie sessions.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the domain.toml overlay (memory by default, PostgreSQL
# under "production").
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from identity.domain import identity
from settings import get_settings
from shared.errors import register_error_handlers
from shared.logging import add_context, clear_context
from shared.uploads import URL_PREFIX
from storefront.domain import storefront

identity.init()
storefront.init()

settings = get_settings()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/auth": identity,
    "/products": storefront,
    "/categories": storefront,
    "/banners": storefront,
    "/cart": storefront,
    "/discounts": storefront,
    "/orders": storefront,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="FreshCart API",
    description="Grocery storefront: Identity & Storefront domains",
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is None:
        # No domain match: pass through (health check, docs, uploads)
        return await call_next(request)

    add_context(domain=domain.name, method=request.method, path=request.url.path)
    try:
        with domain.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# Added after the domain middleware so sessions wrap it
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    https_only=settings.session_https_only,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from identity.api import router as identity_router  # noqa: E402
from storefront.api import (  # noqa: E402
    banner_router,
    cart_router,
    category_router,
    discount_router,
    order_router,
    product_router,
)

app.include_router(identity_router)
app.include_router(product_router)
app.include_router(category_router)
app.include_router(banner_router)
app.include_router(cart_router)
app.include_router(discount_router)
app.include_router(order_router)

upload_dir = Path(settings.upload_dir)
upload_dir.mkdir(parents=True, exist_ok=True)
app.mount(URL_PREFIX, StaticFiles(directory=upload_dir), name="uploads")


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "environment": settings.environment,
            "domains": {
                "identity": {"name": identity.name},
                "storefront": {"name": storefront.name},
            },
        }
    )
