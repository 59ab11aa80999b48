"""Tests for authentication against the identity provider."""
import pytest

from numtrip.config import Settings
from numtrip.core.dependencies import get_identity_provider
from numtrip.infrastructure.external_apis.mock_identity_provider import (
    MOCK_ACCESS_TOKEN,
    MockIdentityProvider,
)
from numtrip.infrastructure.external_apis.supabase_auth_client import SupabaseAuthClient
from numtrip.main import app

API = "/api/v1/auth"


@pytest.fixture
def mock_auth(client):
    app.dependency_overrides[get_identity_provider] = lambda: MockIdentityProvider()
    return client


@pytest.mark.unit
class TestIdentityProviderSelection:
    def test_mock_only_in_development(self):
        dev = Settings(_env_file=None, ENVIRONMENT="development", MOCK_AUTH=True)
        prod = Settings(_env_file=None, ENVIRONMENT="production", MOCK_AUTH=True,
                        SUPABASE_URL="https://x.supabase.co", SUPABASE_ANON_KEY="k")
        assert isinstance(get_identity_provider(dev), MockIdentityProvider)
        assert isinstance(get_identity_provider(prod), SupabaseAuthClient)

    def test_frontend_variable_names_are_accepted(self, monkeypatch):
        monkeypatch.setenv("NEXT_PUBLIC_MOCK_AUTH", "true")
        monkeypatch.setenv("NEXT_PUBLIC_SITE_URL", "https://staging.numtrip.com/")
        settings = Settings(_env_file=None, ENVIRONMENT="development")
        assert settings.mock_auth_enabled is True
        assert settings.site_url == "https://staging.numtrip.com"

    def test_unconfigured(self):
        assert get_identity_provider(Settings(_env_file=None, ENVIRONMENT="production")) is None


@pytest.mark.integration
class TestAuthEndpoints:
    def test_me_with_token(self, client, owner_headers):
        response = client.get(f"{API}/me", headers=owner_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "user-owner"
        assert body["email"] == "owner@numtrip.co"
        assert body["verified"] is True

    def test_me_without_header(self, client):
        response = client.get(f"{API}/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_me_with_malformed_header(self, client):
        response = client.get(f"{API}/me", headers={"Authorization": "Token owner-token"})
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid token"

    def test_login_bad_credentials(self, client):
        response = client.post(f"{API}/login", json={"email": "owner@numtrip.co", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    def test_register_validates_payload(self, client):
        response = client.post(f"{API}/register", json={"email": "not-an-email", "password": "secret1"})
        assert response.status_code == 400
        response = client.post(f"{API}/register", json={"email": "a@numtrip.co", "password": "123"})
        assert response.status_code == 400

    def test_not_configured(self, client):
        app.dependency_overrides[get_identity_provider] = lambda: None
        response = client.get(f"{API}/me", headers={"Authorization": "Bearer anything"})
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "AUTH_NOT_CONFIGURED"


@pytest.mark.integration
class TestMockAuth:
    def test_login_returns_mock_session(self, mock_auth):
        response = mock_auth.post(f"{API}/login", json={"email": "demo@numtrip.com", "password": "whatever"})
        assert response.status_code == 200
        body = response.json()
        assert body["session"]["access_token"] == MOCK_ACCESS_TOKEN
        assert body["user"]["id"] == "mock-user-123"

    def test_mock_token_resolves_demo_user(self, mock_auth):
        response = mock_auth.get(f"{API}/me", headers={"Authorization": f"Bearer {MOCK_ACCESS_TOKEN}"})
        assert response.status_code == 200
        assert response.json()["email"] == "demo@numtrip.com"

    def test_register_without_session(self, mock_auth):
        response = mock_auth.post(
            f"{API}/register",
            json={"email": "nuevo@numtrip.co", "password": "secret1", "name": "Nuevo"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["session"] is None
        assert body["user"]["email"] == "nuevo@numtrip.co"
        assert body["user"]["verified"] is False
