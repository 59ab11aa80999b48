"""Public business directory endpoints."""
import logging
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from numtrip.api.dependencies import client_ip, get_current_user, get_optional_user, verify_admin_key
from numtrip.api.v1.schemas.business_schemas import (
    BusinessCreate,
    BusinessResponse,
    BusinessSearchParams,
    BusinessUpdate,
    PaginatedBusinesses,
)
from numtrip.api.v1.schemas.common_schemas import ERROR_RESPONSES
from numtrip.api.v1.schemas.promo_code_schemas import PromoCodeResponse
from numtrip.api.v1.schemas.validation_schemas import (
    ReportCreate,
    ValidationCreate,
    ValidationHistoryQuery,
    ValidationHistoryResponse,
    ValidationSchema,
    ValidationStatsResponse,
)
from numtrip.application.services.business_service import BusinessService
from numtrip.application.services.indexnow_service import IndexNowService
from numtrip.application.services.promo_code_service import PromoCodeService
from numtrip.application.services.validation_service import ValidationService
from numtrip.core.dependencies import (
    get_business_service,
    get_indexnow_service,
    get_promo_code_service,
    get_validation_service,
)
from numtrip.domain.enums import Locale
from numtrip.infrastructure.persistence import models
from numtrip.services.seo import business_schema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/businesses", tags=["businesses"], responses=ERROR_RESPONSES)


@router.get("", response_model=PaginatedBusinesses)
async def search_businesses(
    params: Annotated[BusinessSearchParams, Query()],
    service: BusinessService = Depends(get_business_service),
):
    """Search businesses by text, city, category and verification status."""
    return await service.search(params)


@router.post("", response_model=BusinessResponse, status_code=status.HTTP_201_CREATED)
async def create_business(
    payload: BusinessCreate,
    background_tasks: BackgroundTasks,
    user: models.User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
    indexnow: IndexNowService = Depends(get_indexnow_service),
):
    business = await service.create(payload)
    logger.info(f"Business {business.id} created by user {user.id}")
    background_tasks.add_task(indexnow.ping_urls, indexnow.business_urls(business))
    return BusinessResponse.from_row(business)


@router.get("/by-slug/{slug}", response_model=BusinessResponse)
async def get_business_by_slug(slug: str, service: BusinessService = Depends(get_business_service)):
    """Resolve an SEO slug (es or en) to its business."""
    return BusinessResponse.from_row(await service.get_by_slug(slug))


@router.get("/{business_id}", response_model=BusinessResponse)
async def get_business(business_id: str, service: BusinessService = Depends(get_business_service)):
    return BusinessResponse.from_row(await service.get(business_id))


@router.patch("/{business_id}", response_model=BusinessResponse, dependencies=[Depends(verify_admin_key)])
async def update_business(
    business_id: str,
    payload: BusinessUpdate,
    service: BusinessService = Depends(get_business_service),
):
    """Administrative update (requires X-Admin-Key)."""
    business = await service.update(business_id, payload)
    logger.info(f"Business {business_id} updated by admin")
    return BusinessResponse.from_row(business)


@router.post("/{business_id}/claim", response_model=BusinessResponse)
async def quick_claim_business(
    business_id: str,
    user: models.User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    return BusinessResponse.from_row(await service.quick_claim(business_id, user.id))


@router.post("/{business_id}/validate", response_model=ValidationSchema, status_code=status.HTTP_201_CREATED)
async def validate_business(
    business_id: str,
    payload: ValidationCreate,
    request: Request,
    user: Optional[models.User] = Depends(get_optional_user),
    service: ValidationService = Depends(get_validation_service),
):
    """Record whether a contact channel works. Anonymous submissions are allowed."""
    return await service.create(
        business_id,
        payload,
        user_id=user.id if user else None,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.post("/{business_id}/report", response_model=ValidationSchema, status_code=status.HTTP_201_CREATED)
async def report_business(
    business_id: str,
    payload: ReportCreate,
    request: Request,
    user: Optional[models.User] = Depends(get_optional_user),
    service: ValidationService = Depends(get_validation_service),
):
    return await service.report(
        business_id,
        payload,
        user_id=user.id if user else None,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/{business_id}/validations/stats", response_model=ValidationStatsResponse)
async def get_validation_stats(business_id: str, service: ValidationService = Depends(get_validation_service)):
    return await service.stats(business_id)


@router.get("/{business_id}/validations", response_model=ValidationHistoryResponse)
async def get_validation_history(
    business_id: str,
    query: Annotated[ValidationHistoryQuery, Query()],
    service: ValidationService = Depends(get_validation_service),
):
    return await service.history(business_id, query)


@router.get("/{business_id}/structured-data")
async def get_structured_data(
    business_id: str,
    locale: Locale = Query(Locale.ES),
    service: BusinessService = Depends(get_business_service),
) -> Dict[str, Any]:
    """JSON-LD for the business page."""
    return business_schema(await service.get(business_id), locale)


@router.get("/{business_id}/promo-codes", response_model=List[PromoCodeResponse])
async def list_valid_promo_codes(business_id: str, service: PromoCodeService = Depends(get_promo_code_service)):
    """Promo codes that can be redeemed right now."""
    return await service.list_valid(business_id)
