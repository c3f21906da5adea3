"""
Main FastAPI application entry point.
Sets up the API, middleware, and routes.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledger_api.api import accounts, transactions, users
from ledger_api.api.exceptions import register_exception_handlers
from ledger_api.core.config import Settings, get_settings
from ledger_api.core.logging_config import configure_logging
from ledger_api.database import Database
from ledger_api.services import LedgerEngine

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database.from_settings(settings)
        database.create_all()
        app.state.database = database
        app.state.ledger = LedgerEngine(
            database,
            lock_timeout=settings.TRANSFER_LOCK_TIMEOUT,
            batch_size=settings.LIST_BATCH_SIZE,
        )
        logger.info("app.started", extra={"database_url": database.engine.url.render_as_string()})
        try:
            yield
        finally:
            database.dispose()
            logger.info("app.stopped")

    # Initialize FastAPI app
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc UI
        lifespan=lifespan,
    )

    # CORS middleware (allows frontend to call API)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def root():
        """
        Root endpoint - service banner.
        """
        return {
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "users": f"{settings.API_V1_PREFIX}/users",
                "accounts": f"{settings.API_V1_PREFIX}/accounts",
                "transactions": f"{settings.API_V1_PREFIX}/transactions"
            }
        }

    @app.get("/health")
    def health_check(request: Request):
        """
        Health check endpoint for monitoring.
        """
        if not request.app.state.database.ping():
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "database": "unreachable"},
            )
        return {
            "status": "healthy",
            "database": "connected"
        }

    # Include API routers
    app.include_router(users.router, prefix=settings.API_V1_PREFIX)
    app.include_router(accounts.router, prefix=settings.API_V1_PREFIX)
    app.include_router(transactions.router, prefix=settings.API_V1_PREFIX)

    return app


app = create_app()
