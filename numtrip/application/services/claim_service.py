"""Ownership claims verified by a one-time code sent to a business contact."""
import asyncio
import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from numtrip.api.v1.schemas.claim_schemas import (
    AdminAction,
    AdminClaimAction,
    StartClaimRequest,
    VerifyClaimRequest,
)
from numtrip.application.services.validation_service import ValidationService
from numtrip.core.errors import ConflictError, NotFoundError, ValidationError
from numtrip.core.notifications import ClaimNotifier
from numtrip.domain.enums import ClaimStatus, VerificationType
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.repositories import (
    SQLAlchemyBusinessRepository,
    SQLAlchemyClaimRepository,
)

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ClaimStatus.PENDING, ClaimStatus.VERIFIED)


def generate_verification_code() -> str:
    """Random 6-digit code, zero padded."""
    return f"{secrets.randbelow(10 ** 6):06d}"


def _digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def contact_matches(business: models.Business, verification_type: VerificationType, contact_value: str) -> bool:
    """Whether the contact belongs to the business for the chosen channel.

    Emails compare case-insensitively; phone numbers compare on digits only.
    """
    if verification_type == VerificationType.EMAIL:
        return bool(business.email) and business.email.strip().lower() == contact_value.strip().lower()
    wanted = _digits(contact_value)
    if not wanted:
        return False
    return wanted in (_digits(business.phone), _digits(business.whatsapp))


class ClaimService:
    def __init__(
        self,
        business_repository: SQLAlchemyBusinessRepository,
        claim_repository: SQLAlchemyClaimRepository,
        validation_service: ValidationService,
        notifier: ClaimNotifier,
        code_ttl_minutes: int = 60,
    ):
        self.businesses = business_repository
        self.claims = claim_repository
        self.validation_service = validation_service
        self.notifier = notifier
        self.code_ttl = timedelta(minutes=code_ttl_minutes)

    async def start(
        self,
        business_id: str,
        user_id: str,
        payload: StartClaimRequest,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> models.BusinessClaim:
        business = await self.businesses.get_by_id(business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        if business.owner_id and business.owner_id != user_id:
            raise ConflictError("This business is already claimed by another user")

        existing = await self.claims.get_for_business_user(business_id, user_id)
        if existing is not None and existing.status in OPEN_STATUSES:
            raise ConflictError("You already have a pending claim for this business")

        if not contact_matches(business, payload.verification_type, payload.contact_value):
            raise ValidationError("Contact value does not match any business contact information")

        code = generate_verification_code()
        fields = {
            "status": ClaimStatus.PENDING,
            "verification_type": payload.verification_type,
            "contact_value": payload.contact_value.strip(),
            "verification_code": code,
            "code_expires_at": datetime.utcnow() + self.code_ttl,
            "claim_reason": payload.claim_reason,
            "ip_address": ip_address,
            "user_agent": (user_agent or "")[:512] or None,
            "admin_notes": None,
            "verified_at": None,
            "approved_at": None,
        }
        if existing is None:
            claim = await self.claims.create({"business_id": business_id, "user_id": user_id, **fields})
        else:
            claim = await self.claims.update(existing, fields)

        await self._send_code(claim, business)
        logger.info(f"Claim {claim.id} started for business {business_id} by user {user_id}")
        return claim

    async def resend(self, claim_id: str, user_id: str) -> models.BusinessClaim:
        """Issue a fresh code for a pending claim."""
        claim = await self.get_own(claim_id, user_id)
        if claim.status != ClaimStatus.PENDING:
            raise ValidationError("Claim is not in a verifiable state")
        claim = await self.claims.update(claim, {
            "verification_code": generate_verification_code(),
            "code_expires_at": datetime.utcnow() + self.code_ttl,
        })
        await self._send_code(claim, claim.business)
        return claim

    async def _send_code(self, claim: models.BusinessClaim, business: models.Business) -> None:
        # SMTP is blocking; keep it off the event loop
        sent = await asyncio.to_thread(
            self.notifier.send_verification_code,
            claim.verification_type,
            claim.contact_value,
            claim.verification_code,
            business.name,
        )
        if not sent:
            raise ValidationError("Failed to send verification code")

    async def verify(self, payload: VerifyClaimRequest, user_id: str) -> models.BusinessClaim:
        claim = await self.claims.get_by_id(payload.claim_id)
        if claim is None or claim.user_id != user_id:
            raise NotFoundError("Claim")
        if claim.status != ClaimStatus.PENDING:
            raise ValidationError("Claim is not in a verifiable state")

        now = datetime.utcnow()
        if claim.code_expires_at is None or claim.code_expires_at < now:
            await self.claims.update(claim, {"status": ClaimStatus.EXPIRED})
            raise ValidationError("Verification code has expired")

        if not secrets.compare_digest(claim.verification_code or "", payload.verification_code):
            raise ValidationError("Invalid verification code")

        claim = await self._approve(claim, {
            "verified_at": now,
            "approved_at": now,
            "verification_code": None,
            "code_expires_at": None,
        })
        logger.info(f"Business claim approved: {claim.business.name} claimed by user {claim.user_id}")
        return claim

    async def _approve(self, claim: models.BusinessClaim, extra: Dict) -> models.BusinessClaim:
        """Mark the claim approved and hand the business over in one commit.

        Competing open claims on the same business are rejected in that commit.
        """
        owner_id = claim.business.owner_id
        if owner_id and owner_id != claim.user_id:
            raise ConflictError("This business is already claimed by another user")

        await self.claims.update(claim, {"status": ClaimStatus.APPROVED, **extra}, commit=False)
        await self.businesses.assign_owner(claim.business, claim.user_id, mark_verified=True, commit=False)
        superseded = await self.claims.reject_open_for_business(
            claim.business_id,
            exclude_claim_id=claim.id,
            statuses=OPEN_STATUSES,
            admin_notes="Business claimed by another user",
        )
        self.claims.commit()
        if superseded:
            logger.info(f"Rejected {superseded} competing claim(s) on business {claim.business_id}")

        if claim.verification_type == VerificationType.EMAIL:
            await asyncio.to_thread(self.notifier.send_claim_approved, claim.contact_value, claim.business.name)
        return claim

    async def list_mine(self, user_id: str) -> List[models.BusinessClaim]:
        return await self.claims.list_for_user(user_id)

    async def owned_businesses(self, user_id: str) -> List[Dict]:
        result = []
        for business in await self.businesses.list_owned_by(user_id):
            result.append({
                "id": business.id,
                "name": business.name,
                "category": business.category,
                "city": business.city,
                "verified": business.verified,
                "active": business.active,
                "claimed_at": business.claimed_at,
                "validation_stats": await self.validation_service.stats_for(business),
            })
        return result

    async def get_own(self, claim_id: str, user_id: str) -> models.BusinessClaim:
        claim = await self.claims.get_by_id(claim_id)
        if claim is None or claim.user_id != user_id:
            raise NotFoundError("Claim")
        return claim

    async def admin_action(self, claim_id: str, payload: AdminClaimAction) -> models.BusinessClaim:
        claim = await self.claims.get_by_id(claim_id)
        if claim is None:
            raise NotFoundError("Claim")

        if payload.action == AdminAction.APPROVE:
            claim = await self._approve(claim, {
                "admin_notes": payload.admin_notes,
                "approved_at": datetime.utcnow(),
                "verification_code": None,
                "code_expires_at": None,
            })
        else:
            claim = await self.claims.update(claim, {
                "status": ClaimStatus.REJECTED,
                "admin_notes": payload.admin_notes,
                "approved_at": None,
            })
        logger.info(f"Admin {payload.action.value} on claim {claim_id}")
        return claim
