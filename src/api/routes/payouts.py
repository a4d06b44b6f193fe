"""Payout administration endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies.common import (
    get_pagination_params,
    get_payout_service,
    paginate,
    require_admin,
)
from src.middleware.logging import get_request_logger
from src.schemas.base import build_resource
from src.schemas.payout import (
    PayoutCollectionResponse,
    PayoutResponse,
    PayoutRunRequest,
    PayoutRunResponse,
)
from src.services.business_rules import Principal
from src.services.payout_service import PayoutService

router = APIRouter()


@router.get("", response_model=PayoutCollectionResponse)
async def list_payouts(
    pagination=Depends(get_pagination_params),
    month: Optional[str] = Query(None, description="Filter by month (YYYY-MM)"),
    payout_status: Optional[str] = Query(None, alias="status", description="PENDING or PAID"),
    admin: Principal = Depends(require_admin),
    service: PayoutService = Depends(get_payout_service),
):
    """List payouts with artist names."""
    payouts = await service.list_payouts(month=month, status=payout_status)
    page = paginate(payouts, pagination)
    return PayoutCollectionResponse(
        data=[build_resource("payout", item) for item in page["items"]],
        meta=page["meta"],
    )


@router.post("/run", response_model=PayoutRunResponse)
async def run_payout(
    request: PayoutRunRequest,
    http_request: Request,
    admin: Principal = Depends(require_admin),
    service: PayoutService = Depends(get_payout_service),
):
    """
    Run the payout computation for a month.

    Safe to repeat: payouts already written for the month are left as they are.
    """
    result = await service.run_monthly_payout(request.month)
    get_request_logger(http_request).info(
        "Payout run finished",
        month=result.month,
        admin_id=str(admin.user_id),
        payouts_created=result.payouts_created,
        payouts_existing=result.payouts_existing,
        skipped_reason=result.skipped_reason,
    )
    return PayoutRunResponse(data=result.to_dict())


@router.post("/{payout_id}/mark-paid", response_model=PayoutResponse)
async def mark_payout_paid(
    payout_id: UUID,
    admin: Principal = Depends(require_admin),
    service: PayoutService = Depends(get_payout_service),
):
    """Record that a payout has been paid out."""
    earning = await service.mark_paid(payout_id, admin.user_id)
    return PayoutResponse(data=build_resource("payout", earning.to_dict()))
