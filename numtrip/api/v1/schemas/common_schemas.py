"""Shared schema building blocks."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase keys; inbound accepts both spellings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationSchema(BaseModel):
    """Pagination metadata."""
    total: int
    page: int
    limit: int
    pages: int


class ErrorDetailSchema(BaseModel):
    code: str
    message: str
    timestamp: str
    path: str
    method: str


class ErrorEnvelope(BaseModel):
    """Body of every error response."""
    error: ErrorDetailSchema


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def reject_null(value):
    """Omit a field to leave it unchanged; null is not a value for it."""
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope, "description": "Validation error"},
    404: {"model": ErrorEnvelope, "description": "Not found"},
}
