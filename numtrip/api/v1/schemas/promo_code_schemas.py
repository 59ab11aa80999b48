"""Schemas for promo codes."""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from numtrip.api.v1.schemas.common_schemas import CamelModel, reject_null, to_naive_utc


class PromoCodeCreate(CamelModel):
    code: str = Field(..., min_length=3, max_length=20)
    description: str = Field(..., min_length=1, max_length=200)
    discount: str = Field(..., min_length=1, max_length=50)
    valid_until: Optional[datetime] = None
    max_usage: Optional[int] = Field(None, ge=1)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("valid_until")
    @classmethod
    def normalize_valid_until(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class PromoCodeUpdate(CamelModel):
    description: Optional[str] = Field(None, min_length=1, max_length=200)
    discount: Optional[str] = Field(None, min_length=1, max_length=50)
    valid_until: Optional[datetime] = None
    active: Optional[bool] = None
    max_usage: Optional[int] = Field(None, ge=1)

    @field_validator("description", "discount", "active")
    @classmethod
    def reject_null_values(cls, value):
        return reject_null(value)

    @field_validator("valid_until")
    @classmethod
    def normalize_valid_until(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class PromoCodeResponse(CamelModel):
    id: str
    code: str
    description: str
    discount: str
    valid_until: Optional[datetime] = None
    active: bool
    usage_count: int
    max_usage: Optional[int] = None
    business_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
