"""Supabase GoTrue client used to verify bearer tokens and manage accounts."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from numtrip.core.errors import ExternalServiceError, UnauthorizedError, ValidationError
from numtrip.infrastructure.external_apis.http_client import get_shared_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentityUser:
    """User as known to the identity provider."""
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    email_confirmed: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "IdentityUser":
        metadata = payload.get("user_metadata") or {}
        return cls(
            id=payload["id"],
            email=payload.get("email") or "",
            name=metadata.get("name"),
            phone=metadata.get("phone") or payload.get("phone") or None,
            email_confirmed=bool(payload.get("email_confirmed_at") or payload.get("confirmed_at")),
        )


def _session_from_payload(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not payload.get("access_token"):
        return None
    return {
        "access_token": payload["access_token"],
        "refresh_token": payload.get("refresh_token"),
        "expires_in": payload.get("expires_in"),
        "token_type": payload.get("token_type", "bearer"),
    }


class SupabaseAuthClient:
    """Thin wrapper over the Supabase auth REST endpoints."""

    def __init__(self, base_url: str, anon_key: str, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_shared_client()

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.anon_key}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def get_user(self, token: str) -> Optional[IdentityUser]:
        """Resolve a bearer token; None when the provider rejects it."""
        try:
            response = await self.client.get(
                f"{self.base_url}/auth/v1/user",
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            logger.error(f"Token verification request failed: {e}")
            return None

        if response.status_code != 200:
            logger.debug(f"Token rejected by identity provider: {response.status_code}")
            return None
        return IdentityUser.from_payload(response.json())

    async def sign_up(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Tuple[IdentityUser, Optional[Dict[str, Any]]]:
        """Create an account. The session is None until the email is confirmed."""
        metadata = {k: v for k, v in {"name": name, "phone": phone}.items() if v}
        try:
            response = await self.client.post(
                f"{self.base_url}/auth/v1/signup",
                headers=self._headers(),
                json={"email": email, "password": password, "data": metadata},
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError("Identity provider", str(e))

        payload = response.json() if response.content else {}
        if response.status_code >= 400:
            message = payload.get("msg") or payload.get("error_description") or "Registration failed"
            raise ValidationError(message)

        user_payload = payload.get("user") or payload
        return IdentityUser.from_payload(user_payload), _session_from_payload(payload)

    async def sign_in(self, email: str, password: str) -> Tuple[IdentityUser, Dict[str, Any]]:
        """Password grant."""
        try:
            response = await self.client.post(
                f"{self.base_url}/auth/v1/token",
                params={"grant_type": "password"},
                headers=self._headers(),
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError("Identity provider", str(e))

        if response.status_code != 200:
            raise UnauthorizedError("Invalid email or password")

        payload = response.json()
        return IdentityUser.from_payload(payload["user"]), _session_from_payload(payload)
