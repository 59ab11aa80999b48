"""Tests for community validations and trust levels."""
from datetime import datetime, timedelta

import pytest

from numtrip.application.services.validation_service import summarize_counts, trust_level
from numtrip.domain.enums import TrustLevel, ValidationType

API = "/api/v1/businesses"


@pytest.mark.unit
class TestTrustLevel:
    @pytest.mark.parametrize("total, positive, verified, expected", [
        (0, 0, False, TrustLevel.LOW),
        (0, 0, True, TrustLevel.LOW),
        (5, 4, True, TrustLevel.VERIFIED),
        (5, 4, False, TrustLevel.MEDIUM),
        (10, 8, False, TrustLevel.HIGH),
        (9, 9, False, TrustLevel.MEDIUM),
        (3, 2, False, TrustLevel.MEDIUM),
        (3, 1, False, TrustLevel.LOW),
        (2, 2, False, TrustLevel.LOW),
        (10, 7, True, TrustLevel.MEDIUM),
    ])
    def test_thresholds(self, total, positive, verified, expected):
        assert trust_level(total, positive, verified) == expected

    def test_summary_groups_by_channel(self):
        counts = [
            (ValidationType.PHONE_WORKS, True, 3),
            (ValidationType.PHONE_INCORRECT, False, 1),
            (ValidationType.WHATSAPP_WORKS, True, 2),
        ]
        summary = summarize_counts(counts, business_verified=False)
        assert summary["total_validations"] == 6
        assert summary["positive_validations"] == 5
        assert summary["negative_validations"] == 1
        assert summary["validation_percentage"] == 83
        assert summary["by_type"]["phone"] == {
            "total": 4, "positive": 3, "negative": 1, "validation_percentage": 75,
        }
        assert summary["by_type"]["email"]["total"] == 0
        assert summary["trust_level"] == TrustLevel.MEDIUM
        assert summary["last_validation"] is None


@pytest.mark.integration
class TestValidationEndpoints:
    def test_anonymous_validation(self, client, make_business):
        business = make_business()
        response = client.post(
            f"{API}/{business.id}/validate",
            json={"type": "PHONE_WORKS", "isCorrect": True},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "pytest"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["businessId"] == business.id
        assert body["userId"] is None
        assert body["isCorrect"] is True

    def test_authenticated_validation_records_user(self, client, make_business, owner_headers):
        business = make_business()
        response = client.post(
            f"{API}/{business.id}/validate",
            json={"type": "EMAIL_INCORRECT", "isCorrect": False, "comment": "Rebota"},
            headers=owner_headers,
        )
        assert response.status_code == 201
        assert response.json()["userId"] == "user-owner"

    def test_validation_for_missing_business(self, client):
        response = client.post(f"{API}/nope/validate", json={"type": "PHONE_WORKS", "isCorrect": True})
        assert response.status_code == 404

    def test_invalid_type(self, client, make_business):
        business = make_business()
        response = client.post(f"{API}/{business.id}/validate", json={"type": "FAX_WORKS", "isCorrect": True})
        assert response.status_code == 400

    def test_report_is_negative_and_needs_comment(self, client, make_business):
        business = make_business()
        response = client.post(f"{API}/{business.id}/report", json={"type": "GENERAL_INCORRECT"})
        assert response.status_code == 400

        response = client.post(
            f"{API}/{business.id}/report",
            json={"type": "GENERAL_INCORRECT", "comment": "Cerrado permanentemente"},
        )
        assert response.status_code == 201
        assert response.json()["isCorrect"] is False

    def test_stats(self, client, make_business, make_validation):
        business = make_business(verified=True)
        for _ in range(4):
            make_validation(business, ValidationType.PHONE_WORKS, True)
        make_validation(business, ValidationType.EMAIL_INCORRECT, False)

        response = client.get(f"{API}/{business.id}/validations/stats")
        assert response.status_code == 200
        body = response.json()
        assert body["totalValidations"] == 5
        assert body["validationPercentage"] == 80
        assert body["trustLevel"] == "VERIFIED"
        assert body["byType"]["phone"]["validationPercentage"] == 100
        assert body["byType"]["email"]["negative"] == 1
        assert body["lastValidation"] is not None

    def test_stats_without_validations(self, client, make_business):
        business = make_business()
        body = client.get(f"{API}/{business.id}/validations/stats").json()
        assert body["totalValidations"] == 0
        assert body["validationPercentage"] == 0
        assert body["trustLevel"] == "LOW"
        assert body["lastValidation"] is None

    def test_history_pagination(self, client, make_business, make_validation):
        business = make_business()
        start = datetime.utcnow() - timedelta(days=1)
        for i in range(12):
            make_validation(business, ValidationType.GENERAL_CORRECT, True, created_at=start + timedelta(minutes=i))

        body = client.get(f"{API}/{business.id}/validations").json()
        assert len(body["data"]) == 10
        assert body["pagination"] == {"total": 12, "page": 1, "limit": 10, "pages": 2}
        created = [row["createdAt"] for row in body["data"]]
        assert created == sorted(created, reverse=True)

        body = client.get(f"{API}/{business.id}/validations", params={"page": 2}).json()
        assert len(body["data"]) == 2

    def test_history_limit_is_capped(self, client, make_business):
        business = make_business()
        response = client.get(f"{API}/{business.id}/validations", params={"limit": 51})
        assert response.status_code == 400
