"""Schemas for contact validations."""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from numtrip.api.v1.schemas.common_schemas import CamelModel, PaginationSchema
from numtrip.domain.enums import TrustLevel, ValidationType


class ValidationCreate(CamelModel):
    type: ValidationType
    is_correct: bool
    comment: Optional[str] = Field(None, max_length=500)


class ReportCreate(CamelModel):
    """A report is a negative validation that must explain itself."""
    type: ValidationType
    comment: str = Field(..., min_length=1, max_length=500)


class ValidationHistoryQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=50)
    type: Optional[ValidationType] = None


class OwnerReplySchema(CamelModel):
    id: str
    response: str
    is_public: bool
    created_at: Optional[datetime] = None


class ValidationSchema(CamelModel):
    id: str
    type: ValidationType
    is_correct: bool
    comment: Optional[str] = None
    business_id: str
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ValidationWithRepliesSchema(ValidationSchema):
    responses: List[OwnerReplySchema] = []


class ChannelStatsSchema(CamelModel):
    total: int = 0
    positive: int = 0
    negative: int = 0
    validation_percentage: int = 0


class ValidationStatsResponse(CamelModel):
    total_validations: int
    positive_validations: int
    negative_validations: int
    validation_percentage: int
    by_type: Dict[str, ChannelStatsSchema]
    trust_level: TrustLevel
    last_validation: Optional[datetime] = None


class ValidationHistoryResponse(BaseModel):
    data: List[ValidationSchema]
    pagination: PaginationSchema
