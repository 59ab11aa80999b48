"""Promo codes: public listing, redemption and owner management."""
import logging
from datetime import datetime
from typing import List

from numtrip.api.v1.schemas.promo_code_schemas import PromoCodeCreate, PromoCodeUpdate
from numtrip.core.errors import ConflictError, NotFoundError
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyPromoCodeRepository,
)

logger = logging.getLogger(__name__)


def unavailable_reason(promo: models.PromoCode, now: datetime):
    """Why a code cannot be redeemed right now, or None if it can."""
    if not promo.active:
        return "Promo code is not active"
    if promo.valid_until is not None and promo.valid_until <= now:
        return "Promo code has expired"
    if promo.max_usage is not None and promo.usage_count >= promo.max_usage:
        return "Promo code usage limit reached"
    return None


class PromoCodeService:
    def __init__(
        self,
        business_repository: SQLAlchemyBusinessRepository,
        promo_code_repository: SQLAlchemyPromoCodeRepository,
    ):
        self.businesses = business_repository
        self.promo_codes = promo_code_repository

    async def _require_business(self, business_id: str) -> models.Business:
        business = await self.businesses.get_by_id(business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        return business

    async def list_valid(self, business_id: str) -> List[models.PromoCode]:
        await self._require_business(business_id)
        return await self.promo_codes.list_valid(business_id, datetime.utcnow())

    async def redeem(self, business_id: str, code: str) -> models.PromoCode:
        promo = await self.promo_codes.get_by_code(business_id, code.strip().upper())
        if promo is None:
            raise NotFoundError("Promo code")
        now = datetime.utcnow()
        if not await self.promo_codes.redeem(promo, now):
            raise ConflictError(unavailable_reason(promo, now) or "Promo code is no longer available")
        logger.info(f"Promo code {promo.code} redeemed for business {business_id} ({promo.usage_count} uses)")
        return promo

    async def list_for_owner(self, business_id: str) -> List[models.PromoCode]:
        return await self.promo_codes.list_for_business(business_id)

    async def create(self, business_id: str, payload: PromoCodeCreate) -> models.PromoCode:
        if await self.promo_codes.get_by_code(business_id, payload.code):
            raise ConflictError(f"Promo code {payload.code} already exists for this business")
        data = payload.model_dump()
        data["business_id"] = business_id
        return await self.promo_codes.create(data)

    async def _require_promo(self, business_id: str, promo_id: str) -> models.PromoCode:
        promo = await self.promo_codes.get_for_business(promo_id, business_id)
        if promo is None:
            raise NotFoundError("Promo code", promo_id)
        return promo

    async def update(self, business_id: str, promo_id: str, payload: PromoCodeUpdate) -> models.PromoCode:
        promo = await self._require_promo(business_id, promo_id)
        return await self.promo_codes.update(promo, payload.model_dump(exclude_unset=True))

    async def deactivate(self, business_id: str, promo_id: str) -> models.PromoCode:
        promo = await self._require_promo(business_id, promo_id)
        return await self.promo_codes.update(promo, {"active": False})
