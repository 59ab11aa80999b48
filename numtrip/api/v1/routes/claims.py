"""Business ownership claims verified by a one-time code."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from numtrip.api.dependencies import client_ip, get_current_user, verify_admin_key
from numtrip.api.v1.schemas.claim_schemas import (
    AdminClaimAction,
    ClaimResponse,
    ClaimWithBusiness,
    OwnedBusinessResponse,
    StartClaimRequest,
    VerifyClaimRequest,
)
from numtrip.application.services.claim_service import ClaimService
from numtrip.core.dependencies import get_claim_service
from numtrip.infrastructure.persistence import models

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/claims", tags=["claims"])


@router.post("/verify", response_model=ClaimResponse)
async def verify_claim(
    payload: VerifyClaimRequest,
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    """Check the code; on success the caller becomes the business owner."""
    return await service.verify(payload, user.id)


@router.get("/mine", response_model=List[ClaimWithBusiness])
async def list_my_claims(
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    return await service.list_mine(user.id)


@router.get("/businesses", response_model=List[OwnedBusinessResponse])
async def list_owned_businesses(
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    return await service.owned_businesses(user.id)


@router.post("/{business_id}/start", response_model=ClaimResponse)
async def start_claim(
    business_id: str,
    payload: StartClaimRequest,
    request: Request,
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    """Open (or reopen) a claim and send a verification code to the chosen contact."""
    return await service.start(
        business_id,
        user.id,
        payload,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.post("/{claim_id}/resend", response_model=ClaimResponse)
async def resend_code(
    claim_id: str,
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    return await service.resend(claim_id, user.id)


@router.get("/{claim_id}", response_model=ClaimWithBusiness)
async def get_claim(
    claim_id: str,
    user: models.User = Depends(get_current_user),
    service: ClaimService = Depends(get_claim_service),
):
    return await service.get_own(claim_id, user.id)


@router.post("/{claim_id}/admin-action", response_model=ClaimResponse, dependencies=[Depends(verify_admin_key)])
async def admin_claim_action(
    claim_id: str,
    payload: AdminClaimAction,
    service: ClaimService = Depends(get_claim_service),
):
    """Approve or reject a claim by hand (requires X-Admin-Key)."""
    claim = await service.admin_action(claim_id, payload)
    logger.info(f"Admin {payload.action.value} on claim {claim_id} -> {claim.status.value}")
    return claim
