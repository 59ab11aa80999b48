"""Offline identity provider for local development (MOCK_AUTH)."""
import uuid
from typing import Any, Dict, Optional, Tuple

from numtrip.infrastructure.external_apis.supabase_auth_client import IdentityUser

MOCK_ACCESS_TOKEN = "mock-access-token-xyz"
MOCK_REFRESH_TOKEN = "mock-refresh-token-abc"

MOCK_USER = IdentityUser(
    id="mock-user-123",
    email="demo@numtrip.com",
    name="Demo User",
    email_confirmed=True,
)

MOCK_SESSION = {
    "access_token": MOCK_ACCESS_TOKEN,
    "refresh_token": MOCK_REFRESH_TOKEN,
    "expires_in": 3600,
    "token_type": "bearer",
}


class MockIdentityProvider:
    """Same interface as SupabaseAuthClient without any network calls."""

    async def get_user(self, token: str) -> Optional[IdentityUser]:
        return MOCK_USER if token == MOCK_ACCESS_TOKEN else None

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Tuple[IdentityUser, Optional[Dict[str, Any]]]:
        return IdentityUser(id=str(uuid.uuid4()), email=email, name=name, phone=phone), None

    async def sign_in(self, email: str, password: str) -> Tuple[IdentityUser, Dict[str, Any]]:
        return MOCK_USER, dict(MOCK_SESSION)
