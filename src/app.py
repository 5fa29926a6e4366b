"""Storefront FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay for every context.
from catalogue.domain import catalogue  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from ordering.domain import ordering  # noqa: E402
from reviews.domain import reviews  # noqa: E402

from shared.api import register_storefront_handlers
from shared.logging import add_context, clear_context

catalogue.init()
identity.init()
ordering.init()
reviews.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/products": catalogue,
    "/companies": catalogue,
    "/favorites": catalogue,
    "/profiles": identity,
    "/cart": ordering,
    "/checkout": ordering,
    "/orders": ordering,
    "/reconciliation": ordering,
    "/reviews": reviews,
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
    title="Organic Storefront API",
    description="Catalogue, address book, cart, checkout, orders and reviews",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_storefront_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Run the request inside its context's domain and tag its log lines."""
    domain = _resolve_domain(request.url.path)
    add_context(
        method=request.method,
        path=request.url.path,
        domain=domain.name if domain else None,
        user_id=request.headers.get("x-user-id"),
    )
    try:
        if domain is None:
            return await call_next(request)
        with domain.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import company_router, favorite_router, product_router  # noqa: E402
from identity.api import router as identity_router  # noqa: E402
from ordering.api import cart_router, checkout_router, order_router, reconciliation_router  # noqa: E402
from reviews.api import review_router  # noqa: E402

app.include_router(product_router)
app.include_router(company_router)
app.include_router(favorite_router)
app.include_router(identity_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)
app.include_router(reconciliation_router)
app.include_router(review_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {domain.name: {"name": domain.name} for domain in (catalogue, identity, ordering, reviews)},
        }
    )
