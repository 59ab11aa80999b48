"""Authentication endpoints backed by the identity provider."""
from fastapi import APIRouter, Depends, status

from numtrip.api.dependencies import get_current_user, require_identity_provider
from numtrip.api.v1.schemas.auth_schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from numtrip.application.services.auth_service import AuthService
from numtrip.core.dependencies import get_auth_service
from numtrip.infrastructure.persistence import models

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_identity_provider)],
)
async def register(payload: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Sign up; ``session`` is null when the provider requires email confirmation."""
    return await service.register(payload)


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(require_identity_provider)])
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return await service.login(payload)


@router.get("/me", response_model=UserResponse)
async def me(user: models.User = Depends(get_current_user)):
    return user
