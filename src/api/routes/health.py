"""Health check and system endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db_session
from src.core.settings import get_settings
from src.schemas.base import HealthCheckResponse
from src.services.events import get_event_publisher

router = APIRouter()
settings = get_settings()

SERVICE_NAME = "music-marketplace-service"
SERVICE_VERSION = "1.0.0"


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    Service health check endpoint.

    Checks the health of the service and its dependencies:
    - Database connectivity
    - Event publishing system
    """
    health_data = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "version": SERVICE_VERSION,
        "environment": settings.environment,
        "dependencies": {}
    }

    overall_status = "healthy"

    # Check database connectivity
    try:
        result = await session.execute(text("SELECT 1 as health_check"))
        row = result.fetchone()
        if row and row[0] == 1:
            health_data["dependencies"]["database"] = {
                "status": "healthy",
                "dialect": session.bind.dialect.name,
                "details": "Connection successful"
            }
        else:
            health_data["dependencies"]["database"] = {
                "status": "unhealthy",
                "details": "Unexpected database response"
            }
            overall_status = "unhealthy"
    except SQLAlchemyError as e:
        health_data["dependencies"]["database"] = {
            "status": "unhealthy",
            "error": str(e),
            "details": "Database connection failed"
        }
        overall_status = "unhealthy"

    # Check event publishing system
    event_publisher = get_event_publisher()
    if event_publisher.event_bus_type == "sqs":
        if event_publisher.sqs_client and event_publisher.queue_url:
            health_data["dependencies"]["events"] = {
                "status": "healthy",
                "type": "sqs",
                "details": "SQS client initialized"
            }
        else:
            health_data["dependencies"]["events"] = {
                "status": "degraded",
                "type": "sqs",
                "details": "SQS not properly configured"
            }
            if overall_status == "healthy":
                overall_status = "degraded"
    else:
        health_data["dependencies"]["events"] = {
            "status": "healthy",
            "type": "mock",
            "details": "Mock event publisher active"
        }

    # Object storage is only reached when a stream URL is signed
    health_data["dependencies"]["storage"] = {
        "status": "healthy",
        "type": "s3",
        "bucket": settings.storage_bucket,
        "details": f"Presigned URLs valid for {settings.presigned_url_expire_seconds}s",
    }

    health_data["status"] = overall_status

    if overall_status == "unhealthy":
        raise HTTPException(
            status_code=503,
            detail={"message": "Service unhealthy", "code": "SERVICE_UNHEALTHY"}
        )

    return HealthCheckResponse(**health_data)


@router.get("/version")
async def version_info():
    """Get service version information."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": settings.environment,
        "api_version": "v1",
        "payout": {
            "artist_revenue_share": settings.artist_revenue_share,
            "platform_revenue_share": settings.platform_revenue_share,
            "min_stream_duration_seconds": settings.min_stream_duration_seconds,
        },
    }
