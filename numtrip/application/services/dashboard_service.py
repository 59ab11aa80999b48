"""Read models and actions for the business-owner dashboard.

Only real data is reported: validation counts, promo-code usage and owner
response rates. Page views and clicks are not tracked.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List

from numtrip.api.v1.schemas.dashboard_schemas import RespondToValidationRequest
from numtrip.application.services.validation_service import percentage
from numtrip.core.errors import NotFoundError
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyPromoCodeRepository,
    SQLAlchemyValidationRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_TRUST_SCORE = 50
PERIOD = timedelta(days=30)


def growth(current: int, previous: int) -> int:
    """Percent change against the previous period (100 when starting from zero)."""
    if previous == 0:
        return 100 if current else 0
    return round(100 * (current - previous) / previous)


def trust_score(total: int, positive: int) -> int:
    return percentage(positive, total) if total else DEFAULT_TRUST_SCORE


class DashboardService:
    def __init__(
        self,
        validation_repository: SQLAlchemyValidationRepository,
        promo_code_repository: SQLAlchemyPromoCodeRepository,
        recent_activity_limit: int = 10,
        validations_limit: int = 50,
        promo_expiry_warning_days: int = 30,
    ):
        self.validations = validation_repository
        self.promo_codes = promo_code_repository
        self.recent_activity_limit = recent_activity_limit
        self.validations_limit = validations_limit
        self.promo_expiry_warning = timedelta(days=promo_expiry_warning_days)

    async def metrics(self, business: models.Business) -> Dict[str, Any]:
        counts = await self.validations.count_by_type(business.id)
        total = sum(count for _, _, count in counts)
        positive = sum(count for _, is_correct, count in counts if is_correct)
        answered = await self.validations.count_answered(business.id)
        now = datetime.utcnow()
        active_codes = await self.promo_codes.list_valid(business.id, now)
        return {
            "total_validations": total,
            "positive_validations": positive,
            "negative_validations": total - positive,
            "trust_score": trust_score(total, positive),
            "promo_code_usage": await self.promo_codes.total_usage(business.id),
            "active_promo_codes": len(active_codes),
            "response_rate": percentage(answered, total),
        }

    async def stats(self, business: models.Business) -> Dict[str, Any]:
        now = datetime.utcnow()
        start_current = now - PERIOD
        start_previous = start_current - PERIOD

        current = await self.validations.count_between(business.id, start_current, now + timedelta(seconds=1))
        current_positive = await self.validations.count_between(
            business.id, start_current, now + timedelta(seconds=1), is_correct=True
        )
        previous = await self.validations.count_between(business.id, start_previous, start_current)
        previous_positive = await self.validations.count_between(
            business.id, start_previous, start_current, is_correct=True
        )
        counts = await self.validations.count_by_type(business.id)
        return {
            "total_validations": sum(count for _, _, count in counts),
            "last_30_days": {"validations": current, "positive_validations": current_positive},
            "previous_30_days": {"validations": previous, "positive_validations": previous_positive},
            "validation_growth": growth(current, previous),
            "positive_growth": growth(current_positive, previous_positive),
        }

    async def recent_activity(self, business: models.Business) -> List[Dict[str, Any]]:
        """Latest validations and promo-code events, newest first."""
        limit = self.recent_activity_limit
        items = []
        for validation in await self.validations.recent_with_responses(business.id, limit):
            verdict = "correct" if validation.is_correct else "incorrect"
            items.append({
                "id": validation.id,
                "kind": "validation",
                "description": f"{validation.type.value} reported {verdict}",
                "created_at": validation.created_at,
            })
        for promo in (await self.promo_codes.list_for_business(business.id))[:limit]:
            items.append({
                "id": promo.id,
                "kind": "promo_code",
                "description": f"Promo code {promo.code} ({promo.usage_count} uses)",
                "created_at": promo.updated_at or promo.created_at,
            })
        items.sort(key=lambda item: item["created_at"] or datetime.min, reverse=True)
        return items[:limit]

    async def overview(self, business: models.Business) -> Dict[str, Any]:
        metrics = await self.metrics(business)
        now = datetime.utcnow()
        expiring = await self.promo_codes.list_expiring(business.id, now, now + self.promo_expiry_warning)
        answered = await self.validations.count_answered(business.id)
        return {
            "business": {
                "id": business.id,
                "name": business.name,
                "category": business.category,
                "verified": business.verified,
                "claimed_at": business.claimed_at,
            },
            "metrics": metrics,
            "stats": await self.stats(business),
            "recent_activity": await self.recent_activity(business),
            "action_items": {
                "unread_validations": max(metrics["total_validations"] - answered, 0),
                "expiring_promo_codes": expiring,
            },
        }

    async def list_validations(self, business: models.Business) -> List[models.Validation]:
        return await self.validations.recent_with_responses(business.id, self.validations_limit)

    async def respond(
        self,
        business: models.Business,
        user_id: str,
        payload: RespondToValidationRequest,
    ) -> models.ValidationResponse:
        validation = await self.validations.get_for_business(payload.validation_id, business.id)
        if validation is None:
            raise NotFoundError("Validation", payload.validation_id)
        reply = await self.validations.add_response({
            "validation_id": validation.id,
            "business_id": business.id,
            "user_id": user_id,
            "response": payload.response,
            "is_public": payload.is_public,
        })
        logger.info(f"Owner {user_id} responded to validation {validation.id}")
        return reply
