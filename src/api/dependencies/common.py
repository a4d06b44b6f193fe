"""Common FastAPI dependencies."""

import math
from typing import Any, Dict, List, Sequence
from uuid import UUID

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db_session
from src.core.settings import get_settings
from src.middleware.auth import DEV_USER_ID
from src.models.user import User
from src.schemas.base import PaginationMeta
from src.services.album_service import AlbumService
from src.services.audit_service import AuditLogService
from src.services.business_rules import Principal
from src.services.complaint_service import ComplaintService
from src.services.dispute_service import DisputeService
from src.services.events import get_event_publisher
from src.services.payout_service import PayoutService
from src.services.song_service import SongService
from src.services.stream_service import StreamService
from src.services.subscription_service import SubscriptionService


def get_current_user_id(request: Request) -> UUID:
    """Get current user ID from request."""
    # For development with DISABLE_AUTH=true, return a default user ID
    settings = get_settings()
    user_id = getattr(request.state, "user_id", None)
    if settings.disable_auth and not user_id:
        user_id = DEV_USER_ID

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "User not authenticated",
                "code": "AUTHENTICATION_REQUIRED"
            }
        )
    return UUID(user_id)


async def get_current_principal(
    user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Resolve the authenticated user into a principal for business rules."""
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "Unknown user",
                "code": "UNKNOWN_USER"
            }
        )
    return Principal(
        user_id=user.id,
        is_admin=user.is_admin,
        artist_status=user.artist_status,
    )


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Only platform administrators may continue."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Administrator access is required",
                "code": "ADMIN_REQUIRED"
            }
        )
    return principal


def require_approved_artist(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Only approved artists may author content under their own name."""
    if not principal.is_approved_artist:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "Only approved artists can manage songs and albums",
                "code": "ARTIST_NOT_APPROVED"
            }
        )
    return principal


async def require_active_subscription(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Listeners need a live subscription to stream."""
    if not await SubscriptionService(session).has_active_subscription(principal.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": "An active subscription is required to stream",
                "code": "SUBSCRIPTION_REQUIRED"
            }
        )
    return principal


def get_pagination_params(
    page: int = Query(1, ge=1, le=1000, description="Page number"),
    per_page: int = Query(25, ge=1, le=100, description="Items per page"),
) -> dict:
    """Get pagination parameters from query string."""
    return {
        "page": page,
        "per_page": per_page,
        "offset": (page - 1) * per_page,
        "limit": per_page,
    }


def paginate(items: Sequence[Any], pagination: dict) -> Dict[str, Any]:
    """Slice an already-loaded collection and build the pagination meta."""
    total = len(items)
    page_items: List[Any] = list(items[pagination["offset"]:pagination["offset"] + pagination["limit"]])
    return {
        "items": page_items,
        "meta": {
            "pagination": PaginationMeta(
                page=pagination["page"],
                per_page=pagination["per_page"],
                total=total,
                pages=math.ceil(total / pagination["per_page"]) if total else 0,
            ).model_dump()
        },
    }


# Service factories

def get_song_service(session: AsyncSession = Depends(get_db_session)) -> SongService:
    return SongService(session, get_event_publisher())


def get_album_service(session: AsyncSession = Depends(get_db_session)) -> AlbumService:
    return AlbumService(session, get_event_publisher())


def get_complaint_service(session: AsyncSession = Depends(get_db_session)) -> ComplaintService:
    return ComplaintService(session, get_event_publisher())


def get_dispute_service(session: AsyncSession = Depends(get_db_session)) -> DisputeService:
    return DisputeService(session, get_event_publisher())


def get_stream_service(session: AsyncSession = Depends(get_db_session)) -> StreamService:
    return StreamService(session)


def get_payout_service(session: AsyncSession = Depends(get_db_session)) -> PayoutService:
    return PayoutService(session, event_publisher=get_event_publisher())


def get_audit_service(session: AsyncSession = Depends(get_db_session)) -> AuditLogService:
    return AuditLogService(session)
