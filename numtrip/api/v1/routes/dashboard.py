"""Business-owner dashboard.

Every route goes through ``require_business_owner``: the caller must be
authenticated and own the (active) business in the path.
"""
import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status

from numtrip.api.dependencies import get_current_user, require_business_owner
from numtrip.api.v1.schemas.business_schemas import BusinessResponse, OwnerBusinessUpdate
from numtrip.api.v1.schemas.dashboard_schemas import (
    ActivityItem,
    DashboardMetricsResponse,
    DashboardOverview,
    RespondToValidationRequest,
    ValidationReplyResponse,
)
from numtrip.api.v1.schemas.promo_code_schemas import PromoCodeCreate, PromoCodeResponse, PromoCodeUpdate
from numtrip.api.v1.schemas.validation_schemas import ValidationWithRepliesSchema
from numtrip.application.services.business_service import BusinessService
from numtrip.application.services.dashboard_service import DashboardService
from numtrip.application.services.indexnow_service import IndexNowService
from numtrip.application.services.promo_code_service import PromoCodeService
from numtrip.core.dependencies import (
    get_business_service,
    get_dashboard_service,
    get_indexnow_service,
    get_promo_code_service,
)
from numtrip.infrastructure.persistence import models

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/business-dashboard/{business_id}", tags=["business-dashboard"])


@router.get("/overview", response_model=DashboardOverview)
async def get_overview(
    business: models.Business = Depends(require_business_owner),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.overview(business)


@router.get("/metrics", response_model=DashboardMetricsResponse)
async def get_metrics(
    business: models.Business = Depends(require_business_owner),
    service: DashboardService = Depends(get_dashboard_service),
):
    return {
        "metrics": await service.metrics(business),
        "stats": await service.stats(business),
    }


@router.get("/activity", response_model=List[ActivityItem])
async def get_activity(
    business: models.Business = Depends(require_business_owner),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.recent_activity(business)


@router.put("/profile", response_model=BusinessResponse)
async def update_profile(
    payload: OwnerBusinessUpdate,
    background_tasks: BackgroundTasks,
    business: models.Business = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
    indexnow: IndexNowService = Depends(get_indexnow_service),
):
    """Owner-editable fields only; category, verification and ownership stay put."""
    business = await service.update_profile(business, payload)
    logger.info(f"Owner updated profile of business {business.id}")
    background_tasks.add_task(indexnow.ping_urls, indexnow.business_urls(business))
    return BusinessResponse.from_row(business)


@router.get("/validations", response_model=List[ValidationWithRepliesSchema])
async def list_validations(
    business: models.Business = Depends(require_business_owner),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.list_validations(business)


@router.post(
    "/validations/respond",
    response_model=ValidationReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def respond_to_validation(
    payload: RespondToValidationRequest,
    business: models.Business = Depends(require_business_owner),
    user: models.User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.respond(business, user.id, payload)


@router.get("/promo-codes", response_model=List[PromoCodeResponse])
async def list_promo_codes(
    business: models.Business = Depends(require_business_owner),
    service: PromoCodeService = Depends(get_promo_code_service),
):
    return await service.list_for_owner(business.id)


@router.post("/promo-codes", response_model=PromoCodeResponse, status_code=status.HTTP_201_CREATED)
async def create_promo_code(
    payload: PromoCodeCreate,
    business: models.Business = Depends(require_business_owner),
    service: PromoCodeService = Depends(get_promo_code_service),
):
    return await service.create(business.id, payload)


@router.patch("/promo-codes/{promo_id}", response_model=PromoCodeResponse)
async def update_promo_code(
    promo_id: str,
    payload: PromoCodeUpdate,
    business: models.Business = Depends(require_business_owner),
    service: PromoCodeService = Depends(get_promo_code_service),
):
    return await service.update(business.id, promo_id, payload)


@router.delete("/promo-codes/{promo_id}", response_model=PromoCodeResponse)
async def delete_promo_code(
    promo_id: str,
    business: models.Business = Depends(require_business_owner),
    service: PromoCodeService = Depends(get_promo_code_service),
):
    """Soft delete: the code is deactivated and kept for its usage history."""
    return await service.deactivate(business.id, promo_id)
