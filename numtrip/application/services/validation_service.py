"""Community validations of business contact data and the derived trust level."""
import logging
from datetime import datetime
from math import ceil
from typing import Dict, Iterable, Optional, Tuple

from numtrip.api.v1.schemas.validation_schemas import (
    ReportCreate,
    ValidationCreate,
    ValidationHistoryQuery,
)
from numtrip.core.errors import NotFoundError
from numtrip.domain.enums import VALIDATION_CHANNELS, TrustLevel, ValidationType
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyValidationRepository,
)

logger = logging.getLogger(__name__)


def percentage(part: int, total: int) -> int:
    return round(100 * part / total) if total else 0


def trust_level(total: int, positive: int, business_verified: bool) -> TrustLevel:
    """Trust tier from validation counts.

    VERIFIED needs a verified business and >= 80% positive; otherwise HIGH
    needs 10+ validations at >= 80%, MEDIUM needs 3+ at >= 60%.
    """
    pct = percentage(positive, total)
    if business_verified and pct >= 80:
        return TrustLevel.VERIFIED
    if total >= 10 and pct >= 80:
        return TrustLevel.HIGH
    if total >= 3 and pct >= 60:
        return TrustLevel.MEDIUM
    return TrustLevel.LOW


def summarize_counts(
    counts: Iterable[Tuple[ValidationType, bool, int]],
    business_verified: bool,
    last_validation: Optional[datetime] = None,
) -> Dict:
    """Fold (type, is_correct, count) rows into the stats payload."""
    by_type = {channel: {"total": 0, "positive": 0, "negative": 0} for channel in VALIDATION_CHANNELS}
    for validation_type, is_correct, count in counts:
        bucket = by_type[ValidationType(validation_type).channel]
        bucket["total"] += count
        bucket["positive" if is_correct else "negative"] += count

    for bucket in by_type.values():
        bucket["validation_percentage"] = percentage(bucket["positive"], bucket["total"])

    total = sum(b["total"] for b in by_type.values())
    positive = sum(b["positive"] for b in by_type.values())
    return {
        "total_validations": total,
        "positive_validations": positive,
        "negative_validations": total - positive,
        "validation_percentage": percentage(positive, total),
        "by_type": by_type,
        "trust_level": trust_level(total, positive, business_verified),
        "last_validation": last_validation,
    }


class ValidationService:
    """Records validations and computes per-business statistics."""

    def __init__(
        self,
        business_repository: SQLAlchemyBusinessRepository,
        validation_repository: SQLAlchemyValidationRepository,
    ):
        self.businesses = business_repository
        self.validations = validation_repository

    async def _require_business(self, business_id: str) -> models.Business:
        business = await self.businesses.get_by_id(business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        return business

    async def create(
        self,
        business_id: str,
        payload: ValidationCreate,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> models.Validation:
        await self._require_business(business_id)
        validation = await self.validations.create({
            "business_id": business_id,
            "type": payload.type,
            "is_correct": payload.is_correct,
            "comment": payload.comment,
            "user_id": user_id,
            "ip_address": ip_address,
            "user_agent": (user_agent or "")[:512] or None,
        })
        logger.info(
            f"Validation {validation.type.value} (correct={validation.is_correct}) recorded for business {business_id}"
        )
        return validation

    async def report(
        self,
        business_id: str,
        payload: ReportCreate,
        user_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> models.Validation:
        return await self.create(
            business_id,
            ValidationCreate(type=payload.type, is_correct=False, comment=payload.comment),
            user_id=user_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def stats_for(self, business: models.Business) -> Dict:
        counts = await self.validations.count_by_type(business.id)
        last = await self.validations.last_created_at(business.id)
        return summarize_counts(counts, bool(business.verified), last)

    async def stats(self, business_id: str) -> Dict:
        business = await self._require_business(business_id)
        return await self.stats_for(business)

    async def history(self, business_id: str, query: ValidationHistoryQuery) -> Dict:
        await self._require_business(business_id)
        rows, total = await self.validations.history(
            business_id,
            skip=(query.page - 1) * query.limit,
            limit=query.limit,
            validation_type=query.type,
        )
        return {
            "data": rows,
            "pagination": {
                "total": total,
                "page": query.page,
                "limit": query.limit,
                "pages": ceil(total / query.limit) if total else 0,
            },
        }
