"""FastAPI application entry point.

Creates the FastAPI application instance with exception handlers,
middleware configuration and the document store lifecycle.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from walletcore.api.v1.router import api_router
from walletcore.core.config import Settings, get_settings
from walletcore.core.exceptions import AppException, InvalidAmountError, InvalidInputError
from walletcore.core.logging_config import configure_logging
from walletcore.db.store import DocumentStore
from walletcore.services.container import Services

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = {"amount"}


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    services = Services.from_settings(settings, store=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await services.store.initialize()
        logger.info(
            "Ledger started with %s store (document %s)",
            type(services.store).__name__,
            services.store.name,
        )
        yield
        await services.store.close()

    app = FastAPI(
        title="Wallet Ledger Core",
        description="Accounts, prepaid wallets, carts and wallet checkout",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.services = services

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    register_exception_handlers(app)

    # Register API routers
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


def error_response(exc: AppException) -> JSONResponse:
    """Render an application error in the shared JSON error format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": exc.kind,
                "message": exc.message,
                "status_code": exc.status_code,
                **exc.details(),
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers for the application."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        """Handle all custom application exceptions.

        Returns a consistent JSON error response format.
        """
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report body validation failures as InvalidAmount or InvalidInput."""
        errors = exc.errors()
        fields = [str(error["loc"][-1]) for error in errors if error.get("loc")]
        summary = "; ".join(
            f"{'.'.join(str(p) for p in error.get('loc', ()))}: {error.get('msg')}"
            for error in errors
        )
        if any(field in AMOUNT_FIELDS for field in fields):
            return error_response(InvalidAmountError(summary))
        return error_response(InvalidInputError(summary))


# Create the application instance
app = create_app()
