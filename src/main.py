"""Main FastAPI application for the Music Marketplace Service."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import admin, albums, complaints, disputes, health, payouts, songs
from src.core.database import get_database
from src.core.settings import get_settings
from src.middleware.auth import AuthenticationMiddleware
from src.middleware.logging import LoggingMiddleware, configure_logging
from src.middleware.rate_limiting import RateLimitMiddleware
from src.schemas.base import JSONAPIErrorResponse
from src.services.exceptions import MarketplaceServiceError, ValidationError

# Initialize logging
configure_logging()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    await get_database().connect()
    yield
    # Shutdown
    await get_database().disconnect()


app = FastAPI(
    title="Music Marketplace Service",
    description="Catalog moderation, complaints, streaming ledger and artist payouts",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    openapi_url="/openapi.json" if not settings.is_production else None,
)

# Security middleware
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.allowed_hosts
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Custom middleware stack (order matters: the last added runs first)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(AuthenticationMiddleware)


# Exception handlers
@app.exception_handler(MarketplaceServiceError)
async def service_error_handler(request: Request, exc: MarketplaceServiceError):
    """Map domain errors to JSON:API error documents."""
    if isinstance(exc, ValidationError) and exc.validation_errors:
        errors = [
            {
                "status": str(exc.status_code),
                "code": error.code,
                "title": "Validation Error",
                "detail": error.message,
                "source": {"pointer": f"/data/attributes/{error.field}"}
            }
            for error in exc.validation_errors
        ]
    else:
        errors = [{
            "status": str(exc.status_code),
            "code": exc.code,
            "title": type(exc).__name__,
            "detail": exc.message,
            "source": {"pointer": request.url.path}
        }]
    return JSONResponse(status_code=exc.status_code, content={"errors": errors})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with JSON:API format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "errors": [{
                "status": str(exc.status_code),
                "code": exc.detail.get("code", "HTTP_ERROR") if isinstance(exc.detail, dict) else "HTTP_ERROR",
                "title": exc.detail.get("message", "HTTP Error") if isinstance(exc.detail, dict) else str(exc.detail),
                "detail": exc.detail.get("message", str(exc.detail)) if isinstance(exc.detail, dict) else str(exc.detail),
                "source": {"pointer": request.url.path}
            }]
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc):
    """Handle 500 errors with JSON:API format."""
    return JSONResponse(
        status_code=500,
        content={
            "errors": [{
                "status": "500",
                "code": "INTERNAL_SERVER_ERROR",
                "title": "Internal Server Error",
                "detail": "An unexpected error occurred"
            }]
        }
    )


# Routes
app.include_router(health.router, prefix="", tags=["system"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": health.SERVICE_NAME,
        "version": health.SERVICE_VERSION,
        "status": "running",
        "api": {
            "docs": "/docs" if not settings.is_production else None,
            "openapi": "/openapi.json" if not settings.is_production else None
        }
    }


# Main API routes
ERROR_RESPONSES = {
    status_code: {"model": JSONAPIErrorResponse}
    for status_code in (401, 403, 404, 409, 422)
}

app.include_router(songs.router, prefix=f"{settings.api_v1_prefix}/songs", tags=["songs"], responses=ERROR_RESPONSES)
app.include_router(albums.router, prefix=f"{settings.api_v1_prefix}/albums", tags=["albums"], responses=ERROR_RESPONSES)
app.include_router(complaints.router, prefix=f"{settings.api_v1_prefix}/complaints", tags=["complaints"], responses=ERROR_RESPONSES)
app.include_router(disputes.router, prefix=f"{settings.api_v1_prefix}/disputes", tags=["disputes"], responses=ERROR_RESPONSES)
app.include_router(payouts.router, prefix=f"{settings.api_v1_prefix}/payouts", tags=["payouts"], responses=ERROR_RESPONSES)
app.include_router(admin.router, prefix=f"{settings.api_v1_prefix}/admin", tags=["admin"], responses=ERROR_RESPONSES)


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
