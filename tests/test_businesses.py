"""Tests for the business directory endpoints."""
import asyncio

import pytest

from numtrip.domain.enums import BusinessCategory
from numtrip.infrastructure.persistence.repositories import SQLAlchemyBusinessRepository

API = "/api/v1/businesses"


@pytest.mark.integration
class TestSearchBusinesses:
    def test_empty_directory(self, client):
        response = client.get(API)
        assert response.status_code == 200
        assert response.json() == {"data": [], "pagination": {"total": 0, "page": 1, "limit": 20, "pages": 0}}

    def test_filters_and_slugs(self, client, make_business):
        make_business(name="Hotel Caribe Azul", verified=True)
        make_business(name="Tours Islas del Rosario", category=BusinessCategory.TOUR, description="Paseos en lancha")
        make_business(name="Hotel Bogota Centro", city="Bogota")

        response = client.get(API, params={"query": "lancha"})
        assert response.status_code == 200
        names = [b["name"] for b in response.json()["data"]]
        assert names == ["Tours Islas del Rosario"]

        response = client.get(API, params={"city": "cartagena", "category": "HOTEL"})
        body = response.json()
        assert body["pagination"]["total"] == 1
        business = body["data"][0]
        assert business["name"] == "Hotel Caribe Azul"
        assert business["slugEs"] == "contacto-de-hotel-caribe-azul-cartagena-verificado"
        assert business["slugEn"] == "contact-for-hotel-caribe-azul-cartagena-verified"

    def test_verified_first_and_pagination(self, client, make_business):
        for i in range(5):
            make_business(name=f"Restaurante {i}", category=BusinessCategory.RESTAURANT, verified=(i == 3))

        response = client.get(API, params={"limit": 2, "page": 1})
        body = response.json()
        assert body["pagination"] == {"total": 5, "page": 1, "limit": 2, "pages": 3}
        assert body["data"][0]["name"] == "Restaurante 3"

        response = client.get(API, params={"limit": 2, "page": 3})
        assert len(response.json()["data"]) == 1

    @pytest.mark.parametrize("params", [
        {"category": "CASINO"},
        {"page": 0},
        {"limit": 101},
        {"limit": 0},
    ])
    def test_invalid_parameters(self, client, params):
        response = client.get(API, params=params)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.integration
class TestGetBusiness:
    def test_get_by_id(self, client, make_business):
        business = make_business()
        response = client.get(f"{API}/{business.id}")
        assert response.status_code == 200
        assert response.json()["id"] == business.id

    def test_missing_business(self, client):
        response = client.get(f"{API}/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Business with id does-not-exist not found"

    def test_get_by_slug_both_locales(self, client, make_business):
        business = make_business(name="Café Getsemaní")
        make_business(name="Café Otro")

        for slug in ("contacto-de-cafe-getsemani-cartagena-no-verificado",
                     "contact-for-cafe-getsemani-cartagena-not-verified"):
            response = client.get(f"{API}/by-slug/{slug}")
            assert response.status_code == 200
            assert response.json()["id"] == business.id

    def test_get_by_slug_falls_back_to_id(self, client, make_business):
        business = make_business()
        response = client.get(f"{API}/by-slug/{business.id}")
        assert response.status_code == 200

    def test_unknown_slug(self, client, make_business):
        make_business()
        response = client.get(f"{API}/by-slug/contacto-de-hotel-inexistente-verificado")
        assert response.status_code == 404


@pytest.mark.integration
class TestCreateAndUpdate:
    def test_create_requires_auth(self, client, sample_business_data):
        response = client.post(API, json=sample_business_data)
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "No authorization header provided"

    def test_create_rejects_bad_token(self, client, sample_business_data):
        response = client.post(API, json=sample_business_data, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid token"

    def test_create(self, client, sample_business_data, owner_headers):
        response = client.post(API, json=sample_business_data, headers=owner_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Hotel Caribe Azul"
        assert body["verified"] is False
        assert body["website"] == "https://caribeazul.co/"

    def test_create_validates_fields(self, client, sample_business_data, owner_headers):
        sample_business_data["name"] = "Ho"
        response = client.post(API, json=sample_business_data, headers=owner_headers)
        assert response.status_code == 400

    def test_create_requires_both_coordinates(self, client, sample_business_data, owner_headers):
        del sample_business_data["longitude"]
        response = client.post(API, json=sample_business_data, headers=owner_headers)
        assert response.status_code == 400

    def test_create_rejects_out_of_range_latitude(self, client, sample_business_data, owner_headers):
        sample_business_data["latitude"] = 123.0
        response = client.post(API, json=sample_business_data, headers=owner_headers)
        assert response.status_code == 400

    def test_admin_update(self, client, make_business, admin_headers):
        business = make_business()
        response = client.patch(f"{API}/{business.id}", json={"verified": True}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["verified"] is True
        assert response.json()["slugEs"].endswith("-verificado")

    def test_update_rejects_wrong_admin_key(self, client, make_business, invalid_admin_headers):
        business = make_business()
        response = client.patch(f"{API}/{business.id}", json={"verified": True}, headers=invalid_admin_headers)
        assert response.status_code == 403

    def test_update_requires_admin_key_header(self, client, make_business):
        business = make_business()
        response = client.patch(f"{API}/{business.id}", json={"verified": True})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("field", ["name", "category", "city", "verified", "active"])
    def test_admin_update_rejects_null_required_field(self, client, make_business, admin_headers, field):
        business = make_business()
        name = business.name
        response = client.patch(f"{API}/{business.id}", json={field: None}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        response = client.get(f"{API}/{business.id}")
        assert response.json()["name"] == name

    def test_admin_update_clears_optional_field(self, client, make_business, admin_headers):
        business = make_business()
        response = client.patch(f"{API}/{business.id}", json={"address": None}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["address"] is None


@pytest.mark.integration
class TestQuickClaim:
    def test_claim_unowned_business(self, client, make_business, owner_headers):
        business = make_business()
        response = client.post(f"{API}/{business.id}/claim", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["ownerId"] == "user-owner"
        assert response.json()["claimedAt"] is not None

    def test_claim_owned_business_conflicts(self, client, make_business, make_user, other_headers):
        owner = make_user("owner-token")
        business = make_business(owner_id=owner.id)
        response = client.post(f"{API}/{business.id}/claim", headers=other_headers)
        assert response.status_code == 409
        assert response.json()["error"]["message"] == "Business is already claimed"


@pytest.mark.integration
def test_structured_data_endpoint(client, make_business):
    business = make_business()
    response = client.get(f"{API}/{business.id}/structured-data", params={"locale": "en"})
    assert response.status_code == 200
    body = response.json()
    assert body["@type"] == "Hotel"
    assert body["address"]["addressCountry"] == "CO"


@pytest.mark.unit
def test_slug_fallback_candidates_are_bounded(test_db_session, make_business):
    for i in range(5):
        make_business(name=f"Hotel Número {i}", verified=bool(i % 2))

    repository = SQLAlchemyBusinessRepository(test_db_session)
    unverified = asyncio.run(repository.list_slug_candidates(False, limit=2))
    assert len(unverified) == 2
    assert all(not b.verified for b in unverified)
    assert len(asyncio.run(repository.list_slug_candidates(None, limit=10))) == 5
