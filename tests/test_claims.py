"""Tests for the verification-code claim flow."""
import asyncio
import threading
from datetime import datetime, timedelta

import pytest

from numtrip.api.v1.schemas.claim_schemas import StartClaimRequest
from numtrip.application.services.claim_service import ClaimService, contact_matches, generate_verification_code
from numtrip.application.services.validation_service import ValidationService
from numtrip.domain.enums import ClaimStatus, VerificationType
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyClaimRepository,
    SQLAlchemyValidationRepository,
)

API = "/api/v1/claims"


def _claim(session, claim_id) -> models.BusinessClaim:
    session.expire_all()
    return session.get(models.BusinessClaim, claim_id)


def _start(client, business, headers, verification_type="EMAIL", contact="reservas@caribeazul.co"):
    return client.post(
        f"{API}/{business.id}/start",
        json={"verificationType": verification_type, "contactValue": contact},
        headers=headers,
    )


@pytest.mark.unit
class TestClaimHelpers:
    def test_code_is_six_digits(self):
        for _ in range(50):
            code = generate_verification_code()
            assert len(code) == 6 and code.isdigit()

    def test_contact_matching(self):
        business = models.Business(email="Reservas@CaribeAzul.co", phone="+57 300 123 4567", whatsapp=None)
        assert contact_matches(business, VerificationType.EMAIL, " reservas@caribeazul.co ")
        assert contact_matches(business, VerificationType.SMS, "573001234567")
        assert contact_matches(business, VerificationType.PHONE_CALL, "+57 (300) 123-4567")
        assert not contact_matches(business, VerificationType.SMS, "reservas@caribeazul.co")
        assert not contact_matches(business, VerificationType.EMAIL, "otro@caribeazul.co")


@pytest.mark.integration
class TestStartClaim:
    def test_start_creates_pending_claim(self, client, make_business, owner_headers, test_db_session):
        business = make_business()
        response = _start(client, business, owner_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "PENDING"
        assert "verificationCode" not in body

        claim = _claim(test_db_session, body["id"])
        assert len(claim.verification_code) == 6
        assert claim.code_expires_at > datetime.utcnow() + timedelta(minutes=59)

    def test_requires_auth(self, client, make_business):
        business = make_business()
        assert _start(client, business, {}).status_code == 401

    def test_missing_business(self, client, owner_headers):
        response = client.post(
            f"{API}/missing/start",
            json={"verificationType": "EMAIL", "contactValue": "a@b.co"},
            headers=owner_headers,
        )
        assert response.status_code == 404

    def test_contact_must_match(self, client, make_business, owner_headers):
        business = make_business()
        response = _start(client, business, owner_headers, contact="someone@else.co")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Contact value does not match any business contact information"
        )

    def test_business_owned_by_someone_else(self, client, make_business, make_user, other_headers):
        owner = make_user("owner-token")
        business = make_business(owner_id=owner.id)
        response = _start(client, business, other_headers)
        assert response.status_code == 409

    def test_duplicate_pending_claim(self, client, make_business, owner_headers):
        business = make_business()
        assert _start(client, business, owner_headers).status_code == 200
        response = _start(client, business, owner_headers, verification_type="SMS", contact="+573001234567")
        assert response.status_code == 409


@pytest.mark.integration
class TestVerifyClaim:
    def test_successful_verification_transfers_ownership(self, client, make_business, owner_headers, test_db_session):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        code = _claim(test_db_session, claim_id).verification_code

        response = client.post(
            f"{API}/verify", json={"claimId": claim_id, "verificationCode": code}, headers=owner_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "APPROVED"
        assert body["verifiedAt"] is not None
        assert body["approvedAt"] is not None

        test_db_session.expire_all()
        business = test_db_session.get(models.Business, business.id)
        assert business.owner_id == "user-owner"
        assert business.verified is True
        assert business.claimed_at is not None
        assert _claim(test_db_session, claim_id).verification_code is None

        owned = client.get(f"{API}/businesses", headers=owner_headers).json()
        assert [b["id"] for b in owned] == [business.id]
        assert owned[0]["validationStats"]["trustLevel"] == "LOW"

    def test_wrong_code(self, client, make_business, owner_headers, test_db_session):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        code = _claim(test_db_session, claim_id).verification_code
        wrong = "000000" if code != "000000" else "111111"

        response = client.post(
            f"{API}/verify", json={"claimId": claim_id, "verificationCode": wrong}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid verification code"
        assert _claim(test_db_session, claim_id).status == ClaimStatus.PENDING

    def test_expired_code_marks_claim_expired(self, client, make_business, owner_headers, test_db_session):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        claim = _claim(test_db_session, claim_id)
        claim.code_expires_at = datetime.utcnow() - timedelta(minutes=1)
        test_db_session.commit()

        response = client.post(
            f"{API}/verify",
            json={"claimId": claim_id, "verificationCode": claim.verification_code},
            headers=owner_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Verification code has expired"
        assert _claim(test_db_session, claim_id).status == ClaimStatus.EXPIRED

    def test_unknown_claim(self, client, owner_headers):
        response = client.post(
            f"{API}/verify", json={"claimId": "nope", "verificationCode": "123456"}, headers=owner_headers
        )
        assert response.status_code == 404

    def test_other_users_claim_is_not_found(self, client, make_business, owner_headers, other_headers):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        response = client.post(
            f"{API}/verify", json={"claimId": claim_id, "verificationCode": "123456"}, headers=other_headers
        )
        assert response.status_code == 404
        assert client.get(f"{API}/{claim_id}", headers=other_headers).status_code == 404

    def test_code_must_be_six_characters(self, client, owner_headers):
        response = client.post(
            f"{API}/verify", json={"claimId": "x", "verificationCode": "123"}, headers=owner_headers
        )
        assert response.status_code == 400


@pytest.mark.integration
class TestClaimManagement:
    def test_resend_issues_new_code(self, client, make_business, owner_headers, test_db_session):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        claim = _claim(test_db_session, claim_id)
        claim.code_expires_at = datetime.utcnow() + timedelta(minutes=1)
        test_db_session.commit()

        response = client.post(f"{API}/{claim_id}/resend", headers=owner_headers)
        assert response.status_code == 200
        assert _claim(test_db_session, claim_id).code_expires_at > datetime.utcnow() + timedelta(minutes=30)

    def test_list_mine_includes_business_summary(self, client, make_business, owner_headers):
        business = make_business()
        _start(client, business, owner_headers)

        claims = client.get(f"{API}/mine", headers=owner_headers).json()
        assert len(claims) == 1
        assert claims[0]["business"]["name"] == business.name

    def test_admin_reject_then_restart(self, client, make_business, owner_headers, admin_headers):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]

        response = client.post(
            f"{API}/{claim_id}/admin-action",
            json={"action": "REJECT", "adminNotes": "No coincide"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"

        # a rejected claim can be reopened
        assert _start(client, business, owner_headers).status_code == 200

    def test_admin_approve(self, client, make_business, owner_headers, admin_headers, test_db_session):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]

        response = client.post(f"{API}/{claim_id}/admin-action", json={"action": "APPROVE"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        test_db_session.expire_all()
        assert test_db_session.get(models.Business, business.id).owner_id == "user-owner"

    def test_admin_action_requires_key(self, client, make_business, owner_headers, invalid_admin_headers):
        business = make_business()
        claim_id = _start(client, business, owner_headers).json()["id"]
        response = client.post(
            f"{API}/{claim_id}/admin-action", json={"action": "APPROVE"}, headers=invalid_admin_headers
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestCompetingClaims:
    def _verify(self, client, claim_id, code, headers):
        return client.post(f"{API}/verify", json={"claimId": claim_id, "verificationCode": code}, headers=headers)

    def test_first_verification_wins(self, client, make_business, owner_headers, other_headers, test_db_session):
        business = make_business()
        first_id = _start(client, business, owner_headers).json()["id"]
        second_id = _start(client, business, other_headers).json()["id"]
        first_code = _claim(test_db_session, first_id).verification_code
        second_code = _claim(test_db_session, second_id).verification_code

        assert self._verify(client, first_id, first_code, owner_headers).status_code == 200

        second = _claim(test_db_session, second_id)
        assert second.status == ClaimStatus.REJECTED
        assert second.verification_code is None

        response = self._verify(client, second_id, second_code, other_headers)
        assert response.status_code == 400
        test_db_session.expire_all()
        assert test_db_session.get(models.Business, business.id).owner_id == "user-owner"

    def test_verify_after_business_was_taken(
        self, client, make_business, owner_headers, other_headers, test_db_session
    ):
        business = make_business()
        claim_id = _start(client, business, other_headers).json()["id"]
        code = _claim(test_db_session, claim_id).verification_code
        assert client.post(f"/api/v1/businesses/{business.id}/claim", headers=owner_headers).status_code == 200

        response = self._verify(client, claim_id, code, other_headers)
        assert response.status_code == 409
        assert _claim(test_db_session, claim_id).status == ClaimStatus.PENDING
        assert test_db_session.get(models.Business, business.id).owner_id == "user-owner"

    def test_admin_cannot_approve_over_existing_owner(
        self, client, make_business, owner_headers, other_headers, admin_headers, test_db_session
    ):
        business = make_business()
        first_id = _start(client, business, owner_headers).json()["id"]
        second_id = _start(client, business, other_headers).json()["id"]
        assert client.post(
            f"{API}/{first_id}/admin-action", json={"action": "APPROVE"}, headers=admin_headers
        ).status_code == 200

        response = client.post(f"{API}/{second_id}/admin-action", json={"action": "APPROVE"}, headers=admin_headers)
        assert response.status_code == 409
        test_db_session.expire_all()
        assert test_db_session.get(models.Business, business.id).owner_id == "user-owner"


class RecordingNotifier:
    """Captures sent codes and the thread each send ran on."""

    def __init__(self):
        self.sent = []

    def send_verification_code(self, verification_type, contact_value, code, business_name):
        self.sent.append((contact_value, code, threading.get_ident()))
        return True

    def send_claim_approved(self, email, business_name):
        return True


@pytest.mark.unit
def test_codes_are_sent_off_the_event_loop(test_db_session, make_business, make_user):
    business = make_business()
    user = make_user("owner-token")
    notifier = RecordingNotifier()
    service = ClaimService(
        SQLAlchemyBusinessRepository(test_db_session),
        SQLAlchemyClaimRepository(test_db_session),
        ValidationService(
            SQLAlchemyBusinessRepository(test_db_session),
            SQLAlchemyValidationRepository(test_db_session),
        ),
        notifier,
    )
    payload = StartClaimRequest(verification_type=VerificationType.EMAIL, contact_value="reservas@caribeazul.co")

    async def start():
        claim = await service.start(business.id, user.id, payload)
        return claim, threading.get_ident()

    claim, loop_thread = asyncio.run(start())
    assert [(contact, code) for contact, code, _ in notifier.sent] == [
        ("reservas@caribeazul.co", claim.verification_code)
    ]
    assert notifier.sent[0][2] != loop_thread
