"""Business directory use cases: search, lookup, create, update and quick claim."""
import logging
from math import ceil
from typing import Any, Dict

from numtrip.api.v1.schemas.business_schemas import (
    BusinessCreate,
    BusinessResponse,
    BusinessSearchParams,
    BusinessUpdate,
    OwnerBusinessUpdate,
)
from numtrip.core.errors import ConflictError, NotFoundError
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import SQLAlchemyBusinessRepository
from numtrip.services.seo import business_slugs, parse_business_slug

logger = logging.getLogger(__name__)

SLUG_FALLBACK_LIMIT = 200


def _payload_to_columns(payload, exclude_unset: bool) -> Dict[str, Any]:
    data = payload.model_dump(exclude_unset=exclude_unset)
    if data.get("website") is not None:
        data["website"] = str(data["website"])
    if data.get("email") is not None:
        data["email"] = str(data["email"])
    return data


class BusinessService:
    """Wraps the business repository with directory rules."""

    def __init__(self, business_repository: SQLAlchemyBusinessRepository):
        self.businesses = business_repository

    async def search(self, params: BusinessSearchParams) -> Dict[str, Any]:
        rows, total = await self.businesses.search(
            query=params.query,
            city=params.city,
            category=params.category,
            verified=params.verified,
            skip=(params.page - 1) * params.limit,
            limit=params.limit,
        )
        return {
            "data": [BusinessResponse.from_row(row) for row in rows],
            "pagination": {
                "total": total,
                "page": params.page,
                "limit": params.limit,
                "pages": ceil(total / params.limit) if total else 0,
            },
        }

    async def get(self, business_id: str) -> models.Business:
        business = await self.businesses.get_by_id(business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        return business

    async def get_by_slug(self, slug: str) -> models.Business:
        """Resolve an es/en slug back to its business.

        Candidates whose names contain the slug's leading word are checked
        first. Accents and punctuation are lost in the slug, so on a miss the
        newest SLUG_FALLBACK_LIMIT businesses with the same verification flag
        are tried. A slug that does not parse is tried as a plain id.
        """
        parsed = parse_business_slug(slug)
        if parsed is None:
            return await self.get(slug)

        def matches(row: models.Business) -> bool:
            return slug in business_slugs(row).values()

        words = parsed.name_fragment.split()
        # the city may be folded into the fragment; try the leading name word only
        for candidate in await self.businesses.find_by_name_fragment(words[0]):
            if matches(candidate):
                return candidate

        for candidate in await self.businesses.list_slug_candidates(parsed.verified, SLUG_FALLBACK_LIMIT):
            if matches(candidate):
                return candidate

        raise NotFoundError("Business")

    async def create(self, payload: BusinessCreate) -> models.Business:
        business = await self.businesses.create(_payload_to_columns(payload, exclude_unset=False))
        logger.info(f"Business created: {business.id} ({business.name})")
        return business

    async def update(self, business_id: str, payload: BusinessUpdate) -> models.Business:
        business = await self.get(business_id)
        changes = _payload_to_columns(payload, exclude_unset=True)
        return await self.businesses.update(business, changes)

    async def update_profile(self, business: models.Business, payload: OwnerBusinessUpdate) -> models.Business:
        changes = _payload_to_columns(payload, exclude_unset=True)
        return await self.businesses.update(business, changes)

    async def quick_claim(self, business_id: str, user_id: str) -> models.Business:
        """Take ownership of an unowned business directly."""
        business = await self.get(business_id)
        if business.owner_id:
            raise ConflictError("Business is already claimed")
        business = await self.businesses.assign_owner(business, user_id)
        logger.info(f"Business {business_id} claimed by user {user_id}")
        return business

