"""Schemas for business endpoints."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, field_validator, model_validator

from numtrip.api.v1.schemas.common_schemas import CamelModel, PaginationSchema, reject_null
from numtrip.domain.enums import BusinessCategory, Locale
from numtrip.domain.value_objects.coordinates import Coordinates
from numtrip.services.seo import business_slugs


class BusinessSearchParams(BaseModel):
    """Query string for GET /businesses."""
    query: Optional[str] = None
    city: Optional[str] = None
    category: Optional[BusinessCategory] = None
    verified: Optional[bool] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)


class _GeoModel(CamelModel):
    """Validates latitude/longitude pairs through Coordinates."""

    @model_validator(mode="after")
    def check_coordinates(self):
        latitude = getattr(self, "latitude", None)
        longitude = getattr(self, "longitude", None)
        if (latitude is None) != (longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        Coordinates.from_optional(latitude, longitude)
        return self


class BusinessCreate(_GeoModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: BusinessCategory
    city: str = Field(..., min_length=2, max_length=50)
    address: Optional[str] = Field(None, max_length=200)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = Field(None, max_length=20)
    website: Optional[HttpUrl] = None
    google_place_id: Optional[str] = None
    verified: bool = False
    active: bool = True


class BusinessUpdate(_GeoModel):
    """Admin update; every field optional."""
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[BusinessCategory] = None
    city: Optional[str] = Field(None, min_length=2, max_length=50)
    address: Optional[str] = Field(None, max_length=200)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = Field(None, max_length=20)
    website: Optional[HttpUrl] = None
    google_place_id: Optional[str] = None
    verified: Optional[bool] = None
    active: Optional[bool] = None

    @field_validator("name", "category", "city", "verified", "active")
    @classmethod
    def reject_null_values(cls, value):
        return reject_null(value)


class OwnerBusinessUpdate(CamelModel):
    """Fields an owner may change from the dashboard."""
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    address: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    whatsapp: Optional[str] = Field(None, max_length=20)
    website: Optional[HttpUrl] = None

    @field_validator("name")
    @classmethod
    def reject_null_values(cls, value):
        return reject_null(value)


class BusinessResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: BusinessCategory
    city: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp: Optional[str] = None
    website: Optional[str] = None
    google_place_id: Optional[str] = None
    verified: bool
    active: bool
    owner_id: Optional[str] = None
    claimed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    slug_es: Optional[str] = None
    slug_en: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "BusinessResponse":
        slugs = business_slugs(row)
        return cls.model_validate(row).model_copy(
            update={"slug_es": slugs[Locale.ES], "slug_en": slugs[Locale.EN]}
        )


class PaginatedBusinesses(BaseModel):
    data: List[BusinessResponse]
    pagination: PaginationSchema


class BusinessSummary(CamelModel):
    id: str
    name: str
    category: BusinessCategory
    city: str
    verified: bool
    active: bool
