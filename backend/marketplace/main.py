"""
Classifieds Marketplace - FastAPI Application

Main entry point for the backend API.
Provides endpoints for payment requests, subscriptions, plans, and
advertisements.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.config.settings import settings
from marketplace.infrastructure.exceptions import (
    MarketplaceError,
    ValidationError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ConflictError,
    StorageError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"Marketplace backend starting in {settings.environment} mode...")

    if settings.database_url:
        from marketplace.infrastructure.db.database import init_db
        await init_db()
        logger.info("Database connection pool initialized")
    else:
        logger.warning("DATABASE_URL not set; database-backed routes will fail")

    yield

    # Shutdown
    if settings.database_url:
        from marketplace.infrastructure.db.database import close_db
        await close_db()
        logger.info("Database connection pool closed")

    logger.info("Marketplace backend shutting down...")


app = FastAPI(
    title="Classifieds Marketplace",
    description="Manual payment verification and subscription provisioning",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(InvalidStateError)
async def invalid_state_error_handler(request: Request, exc: InvalidStateError):
    """Handle illegal status transitions."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(ForbiddenError)
async def forbidden_error_handler(request: Request, exc: ForbiddenError):
    """Handle role and ownership failures."""
    return JSONResponse(
        status_code=403,
        content=exc.to_dict(),
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return JSONResponse(
        status_code=404,
        content=exc.to_dict(),
    )


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    """Handle concurrent writes that hit a uniqueness constraint."""
    return JSONResponse(
        status_code=409,
        content=exc.to_dict(),
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Handle object store failures."""
    return JSONResponse(
        status_code=502,
        content=exc.to_dict(),
    )


@app.exception_handler(MarketplaceError)
async def general_error_handler(request: Request, exc: MarketplaceError):
    """Handle all other application errors."""
    logger.error(f"Unhandled application error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "classifieds-marketplace"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Classifieds Marketplace API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from marketplace.api.routes import (  # noqa: E402
    payment_requests,
    user_subscriptions,
    subscription_plans,
    advertisements,
    uploads,
)

app.include_router(payment_requests.router, prefix="/api", tags=["Payment Requests"])
app.include_router(user_subscriptions.router, prefix="/api", tags=["User Subscriptions"])
app.include_router(subscription_plans.router, prefix="/api", tags=["Subscription Plans"])
app.include_router(advertisements.router, prefix="/api", tags=["Advertisements"])
app.include_router(uploads.router, prefix="/api", tags=["Uploads"])
