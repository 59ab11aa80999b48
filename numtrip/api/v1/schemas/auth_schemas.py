"""Schemas for authentication endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from numtrip.api.v1.schemas.common_schemas import CamelModel


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    verified: bool
    created_at: Optional[datetime] = None


class SessionSchema(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    user: UserResponse
    session: Optional[SessionSchema] = None
