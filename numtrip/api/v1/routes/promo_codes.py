"""Promo code redemption."""
from fastapi import APIRouter, Depends, Query

from numtrip.api.v1.schemas.promo_code_schemas import PromoCodeResponse
from numtrip.application.services.promo_code_service import PromoCodeService
from numtrip.core.dependencies import get_promo_code_service

router = APIRouter(prefix="/promo-codes", tags=["promo-codes"])


@router.post("/{code}/redeem", response_model=PromoCodeResponse)
async def redeem_promo_code(
    code: str,
    business_id: str = Query(..., alias="business_id"),
    service: PromoCodeService = Depends(get_promo_code_service),
):
    """Count one use of a code; 409 when it is inactive, expired or used up."""
    return await service.redeem(business_id, code)
