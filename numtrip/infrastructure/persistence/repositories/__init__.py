"""SQLAlchemy repositories."""
from numtrip.infrastructure.persistence.repositories.business_repository import SQLAlchemyBusinessRepository
from numtrip.infrastructure.persistence.repositories.claim_repository import SQLAlchemyClaimRepository
from numtrip.infrastructure.persistence.repositories.promo_code_repository import SQLAlchemyPromoCodeRepository
from numtrip.infrastructure.persistence.repositories.user_repository import SQLAlchemyUserRepository
from numtrip.infrastructure.persistence.repositories.validation_repository import SQLAlchemyValidationRepository

__all__ = [
    "SQLAlchemyBusinessRepository",
    "SQLAlchemyClaimRepository",
    "SQLAlchemyPromoCodeRepository",
    "SQLAlchemyUserRepository",
    "SQLAlchemyValidationRepository",
]
