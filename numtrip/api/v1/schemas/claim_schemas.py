"""Schemas for the business ownership claim flow."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from numtrip.api.v1.schemas.business_schemas import BusinessSummary
from numtrip.api.v1.schemas.common_schemas import CamelModel
from numtrip.api.v1.schemas.validation_schemas import ValidationStatsResponse
from numtrip.domain.enums import ClaimStatus, VerificationType


class AdminAction(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class StartClaimRequest(CamelModel):
    verification_type: VerificationType
    contact_value: str = Field(..., min_length=1, max_length=255)
    claim_reason: Optional[str] = Field(None, max_length=500)


class VerifyClaimRequest(CamelModel):
    claim_id: str
    verification_code: str = Field(..., min_length=6, max_length=6)


class AdminClaimAction(CamelModel):
    action: AdminAction
    admin_notes: Optional[str] = Field(None, max_length=1000)


class ClaimResponse(CamelModel):
    id: str
    business_id: str
    user_id: str
    status: ClaimStatus
    verification_type: VerificationType
    contact_value: str
    code_expires_at: Optional[datetime] = None
    claim_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    verified_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class ClaimWithBusiness(ClaimResponse):
    business: BusinessSummary


class OwnedBusinessResponse(BusinessSummary):
    claimed_at: Optional[datetime] = None
    validation_stats: ValidationStatsResponse
