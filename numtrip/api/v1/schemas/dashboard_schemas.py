"""Schemas for the business-owner dashboard."""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from numtrip.api.v1.schemas.common_schemas import CamelModel
from numtrip.api.v1.schemas.promo_code_schemas import PromoCodeResponse
from numtrip.domain.enums import BusinessCategory


class DashboardMetrics(CamelModel):
    total_validations: int
    positive_validations: int
    negative_validations: int
    trust_score: int
    promo_code_usage: int
    active_promo_codes: int
    response_rate: int


class PeriodStats(CamelModel):
    validations: int
    positive_validations: int


class DashboardStats(CamelModel):
    total_validations: int
    last_30_days: PeriodStats
    previous_30_days: PeriodStats
    validation_growth: int
    positive_growth: int


class ActivityItem(CamelModel):
    id: str
    kind: str
    description: str
    created_at: Optional[datetime] = None


class BusinessInfo(CamelModel):
    id: str
    name: str
    category: BusinessCategory
    verified: bool
    claimed_at: Optional[datetime] = None


class ActionItems(CamelModel):
    unread_validations: int
    expiring_promo_codes: List[PromoCodeResponse]


class DashboardOverview(CamelModel):
    business: BusinessInfo
    metrics: DashboardMetrics
    stats: DashboardStats
    recent_activity: List[ActivityItem]
    action_items: ActionItems


class DashboardMetricsResponse(CamelModel):
    metrics: DashboardMetrics
    stats: DashboardStats


class RespondToValidationRequest(CamelModel):
    validation_id: str
    response: str = Field(..., min_length=1, max_length=1000)
    is_public: bool = True


class ValidationReplyResponse(CamelModel):
    id: str
    validation_id: str
    business_id: str
    user_id: str
    response: str
    is_public: bool
    created_at: Optional[datetime] = None
