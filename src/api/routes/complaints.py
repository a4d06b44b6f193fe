"""Complaints API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.dependencies.common import (
    get_complaint_service,
    get_current_principal,
    require_admin,
)
from src.schemas.base import build_resource
from src.schemas.complaint import (
    ComplaintCollectionResponse,
    ComplaintCreateRequest,
    ComplaintResolveRequest,
    ComplaintResponse,
)
from src.services.business_rules import Principal
from src.services.complaint_service import ComplaintService

router = APIRouter()


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    request: ComplaintCreateRequest,
    principal: Principal = Depends(get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
):
    """
    Report a song.

    The song is taken down as soon as the complaint is recorded and stays
    down until an administrator resolves the complaint.
    """
    attributes = request.data.attributes
    complaint = await service.create_complaint(
        attributes.song_id,
        principal.user_id,
        attributes.reason,
    )
    return ComplaintResponse(data=build_resource("complaint", complaint.to_dict()))


@router.get("/mine", response_model=ComplaintCollectionResponse)
async def list_my_complaints(
    principal: Principal = Depends(get_current_principal),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Complaints filed by the caller."""
    complaints = await service.list_user_complaints(principal.user_id)
    return ComplaintCollectionResponse(
        data=[build_resource("complaint", item) for item in complaints],
    )


@router.get("", response_model=ComplaintCollectionResponse)
async def list_open_complaints(
    admin: Principal = Depends(require_admin),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Open complaints awaiting review (admin)."""
    complaints = await service.list_open_complaints()
    return ComplaintCollectionResponse(
        data=[build_resource("complaint", item) for item in complaints],
    )


@router.post("/{complaint_id}/resolve", response_model=ComplaintResponse)
async def resolve_complaint(
    complaint_id: UUID,
    request: ComplaintResolveRequest,
    admin: Principal = Depends(require_admin),
    service: ComplaintService = Depends(get_complaint_service),
):
    """Resolve a complaint with RESTORE or REMOVE (admin)."""
    complaint = await service.resolve_complaint(complaint_id, request.action, admin.user_id)
    return ComplaintResponse(data=build_resource("complaint", complaint.to_dict()))
