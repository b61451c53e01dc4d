"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shet import __version__
from shet.config import get_settings
from shet.ledger.database import close_db, init_db
from shet.policy.errors import PolicyError
from shet.utils.locks import LockTimeoutError

logger = logging.getLogger(__name__)

# Anything not listed is a bad request (400)
ERROR_STATUS = {
    "BlacklistedParty": 403,
    "TradingDisabled": 403,
    "TxLimitExceeded": 403,
    "WalletLimitExceeded": 403,
    "Unauthorized": 403,
    "RateLimited": 409,
    "AlreadyInitialized": 409,
    "NotInitialized": 503,
}


def error_status(error: PolicyError) -> int:
    """HTTP status for a policy error kind."""
    return ERROR_STATUS.get(error.code, 400)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    if not settings.admin_token:
        logger.warning(
            "ADMIN_TOKEN is not set: admin routes trust the X-Caller-Address header alone"
        )

    app = FastAPI(
        title="SHET API",
        description="Token ledger with transfer-policy enforcement",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PolicyError)
    async def policy_error_handler(request: Request, exc: PolicyError) -> JSONResponse:
        return JSONResponse(
            status_code=error_status(exc),
            content={"error": exc.code, "detail": exc.message},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "InvalidRequest", "detail": str(exc)})

    @app.exception_handler(LockTimeoutError)
    async def lock_timeout_handler(request: Request, exc: LockTimeoutError) -> JSONResponse:
        logger.error(f"Ledger busy: {exc}")
        return JSONResponse(status_code=503, content={"error": "LedgerBusy", "detail": str(exc)})

    # Register routes
    from shet.api.routers import admin
    from shet.api.routes import health, token

    app.include_router(health.router, tags=["Health"])
    app.include_router(token.router, prefix="/api/v1", tags=["Token"])
    app.include_router(admin.router, tags=["Admin"])

    return app
