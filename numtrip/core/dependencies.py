"""Dependency injection for FastAPI routes.

Repositories get a per-request session from ``get_db``; services are built
on top of them. Tests swap ``get_db`` and ``get_settings`` through
``app.dependency_overrides``.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from numtrip.application.services.auth_service import AuthService
from numtrip.application.services.business_service import BusinessService
from numtrip.application.services.claim_service import ClaimService
from numtrip.application.services.dashboard_service import DashboardService
from numtrip.application.services.indexnow_service import IndexNowService
from numtrip.application.services.promo_code_service import PromoCodeService
from numtrip.application.services.validation_service import ValidationService
from numtrip.config import Settings, get_settings
from numtrip.core.notifications import ClaimNotifier
from numtrip.infrastructure.external_apis.indexnow_client import IndexNowClient
from numtrip.infrastructure.external_apis.mock_identity_provider import MockIdentityProvider
from numtrip.infrastructure.external_apis.supabase_auth_client import SupabaseAuthClient
from numtrip.infrastructure.persistence.db import get_db
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyClaimRepository,
    SQLAlchemyPromoCodeRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyValidationRepository,
)


# Repositories
def get_business_repository(db: Session = Depends(get_db)) -> SQLAlchemyBusinessRepository:
    return SQLAlchemyBusinessRepository(db)


def get_validation_repository(db: Session = Depends(get_db)) -> SQLAlchemyValidationRepository:
    return SQLAlchemyValidationRepository(db)


def get_promo_code_repository(db: Session = Depends(get_db)) -> SQLAlchemyPromoCodeRepository:
    return SQLAlchemyPromoCodeRepository(db)


def get_claim_repository(db: Session = Depends(get_db)) -> SQLAlchemyClaimRepository:
    return SQLAlchemyClaimRepository(db)


def get_user_repository(db: Session = Depends(get_db)) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db)


# External services
def get_identity_provider(settings: Settings = Depends(get_settings)):
    """Supabase client, or the offline mock in development with MOCK_AUTH.

    Returns None when no identity provider is configured.
    """
    if settings.mock_auth_enabled:
        return MockIdentityProvider()
    if settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY:
        return SupabaseAuthClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    return None


def get_indexnow_service(settings: Settings = Depends(get_settings)) -> IndexNowService:
    client = None
    if settings.INDEXNOW_KEY:
        client = IndexNowClient(settings.INDEXNOW_KEY, settings.INDEXNOW_API_URL)
    return IndexNowService(client, settings.site_url, batch_size=settings.INDEXNOW_BATCH_SIZE)


def get_claim_notifier(settings: Settings = Depends(get_settings)) -> ClaimNotifier:
    return ClaimNotifier(settings)


# Application services
def get_business_service(
    repo: SQLAlchemyBusinessRepository = Depends(get_business_repository),
) -> BusinessService:
    return BusinessService(repo)


def get_validation_service(
    businesses: SQLAlchemyBusinessRepository = Depends(get_business_repository),
    validations: SQLAlchemyValidationRepository = Depends(get_validation_repository),
) -> ValidationService:
    return ValidationService(businesses, validations)


def get_promo_code_service(
    businesses: SQLAlchemyBusinessRepository = Depends(get_business_repository),
    promo_codes: SQLAlchemyPromoCodeRepository = Depends(get_promo_code_repository),
) -> PromoCodeService:
    return PromoCodeService(businesses, promo_codes)


def get_claim_service(
    businesses: SQLAlchemyBusinessRepository = Depends(get_business_repository),
    claims: SQLAlchemyClaimRepository = Depends(get_claim_repository),
    validation_service: ValidationService = Depends(get_validation_service),
    notifier: ClaimNotifier = Depends(get_claim_notifier),
    settings: Settings = Depends(get_settings),
) -> ClaimService:
    return ClaimService(
        businesses,
        claims,
        validation_service,
        notifier,
        code_ttl_minutes=settings.CLAIM_CODE_TTL_MINUTES,
    )


def get_dashboard_service(
    validations: SQLAlchemyValidationRepository = Depends(get_validation_repository),
    promo_codes: SQLAlchemyPromoCodeRepository = Depends(get_promo_code_repository),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(
        validations,
        promo_codes,
        recent_activity_limit=settings.RECENT_ACTIVITY_LIMIT,
        validations_limit=settings.DASHBOARD_VALIDATIONS_LIMIT,
        promo_expiry_warning_days=settings.PROMO_EXPIRY_WARNING_DAYS,
    )


def get_auth_service(
    identity_provider=Depends(get_identity_provider),
    users: SQLAlchemyUserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(identity_provider, users)
