"""Ownership dispute endpoints (admin)."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.dependencies.common import get_dispute_service, require_admin
from src.schemas.base import build_resource
from src.schemas.complaint import (
    DisputeCollectionResponse,
    DisputeResolveRequest,
    DisputeResponse,
)
from src.services.business_rules import Principal
from src.services.dispute_service import DisputeService

router = APIRouter()


@router.get("", response_model=DisputeCollectionResponse)
async def list_open_disputes(
    admin: Principal = Depends(require_admin),
    service: DisputeService = Depends(get_dispute_service),
):
    """Open disputes with both song titles."""
    disputes = await service.list_open_disputes()
    return DisputeCollectionResponse(
        data=[build_resource("dispute", item) for item in disputes],
    )


@router.post("/{dispute_id}/resolve", response_model=DisputeResponse)
async def resolve_dispute(
    dispute_id: UUID,
    request: DisputeResolveRequest,
    admin: Principal = Depends(require_admin),
    service: DisputeService = Depends(get_dispute_service),
):
    """Keep the winning song and reject the other one."""
    dispute = await service.resolve_dispute(dispute_id, request.winner_song_id, admin.user_id)
    return DisputeResponse(data=build_resource("dispute", dispute.to_dict()))
