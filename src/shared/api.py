"""HTTP error mapping for the storefront API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.exceptions import NotAuthenticated, NotAuthorized, PaymentFailed, PersistenceFailed


def register_storefront_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the storefront-specific ones.

    Starlette resolves handlers by the exception's MRO, so the subclasses
    registered here win over Protean's ``ValidationError`` handler.
    """
    register_exception_handlers(app)

    @app.exception_handler(NotAuthenticated)
    async def not_authenticated(request: Request, exc: NotAuthenticated):
        return JSONResponse(status_code=401, content={"error": str(exc)})

    @app.exception_handler(NotAuthorized)
    async def not_authorized(request: Request, exc: NotAuthorized):
        return JSONResponse(status_code=403, content={"error": str(exc)})

    @app.exception_handler(PaymentFailed)
    async def payment_failed(request: Request, exc: PaymentFailed):
        return JSONResponse(status_code=402, content={"error": exc.messages})

    @app.exception_handler(PersistenceFailed)
    async def persistence_failed(request: Request, exc: PersistenceFailed):
        return JSONResponse(
            status_code=502,
            content={"error": exc.messages, "reconciliation_case_id": exc.case_id},
        )
