"""Registration and login against the identity provider, mirrored into users."""
import logging
from typing import Any, Dict

from numtrip.api.v1.schemas.auth_schemas import LoginRequest, RegisterRequest
from numtrip.infrastructure.persistence.repositories import SQLAlchemyUserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, identity_provider, user_repository: SQLAlchemyUserRepository):
        self.identity = identity_provider
        self.users = user_repository

    async def register(self, payload: RegisterRequest) -> Dict[str, Any]:
        identity, session = await self.identity.sign_up(
            str(payload.email), payload.password, name=payload.name, phone=payload.phone
        )
        user = await self.users.upsert_identity(identity)
        logger.info(f"User registered: {user.id}")
        return {"user": user, "session": session}

    async def login(self, payload: LoginRequest) -> Dict[str, Any]:
        identity, session = await self.identity.sign_in(str(payload.email), payload.password)
        user = await self.users.upsert_identity(identity)
        return {"user": user, "session": session}
