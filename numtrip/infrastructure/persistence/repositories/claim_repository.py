"""SQLAlchemy repository for business ownership claims."""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, joinedload

from numtrip.domain.enums import ClaimStatus
from numtrip.infrastructure.persistence import models


class SQLAlchemyClaimRepository:
    """Claim repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, claim_id: str) -> Optional[models.BusinessClaim]:
        return self.session.get(models.BusinessClaim, claim_id)

    async def get_for_business_user(self, business_id: str, user_id: str) -> Optional[models.BusinessClaim]:
        return (
            self.session.query(models.BusinessClaim)
            .filter(
                models.BusinessClaim.business_id == business_id,
                models.BusinessClaim.user_id == user_id,
            )
            .first()
        )

    async def list_for_user(self, user_id: str) -> List[models.BusinessClaim]:
        return (
            self.session.query(models.BusinessClaim)
            .options(joinedload(models.BusinessClaim.business))
            .filter(models.BusinessClaim.user_id == user_id)
            .order_by(models.BusinessClaim.created_at.desc())
            .all()
        )

    async def create(self, data: Dict[str, Any]) -> models.BusinessClaim:
        row = models.BusinessClaim(**data)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    async def update(
        self,
        claim: models.BusinessClaim,
        changes: Dict[str, Any],
        commit: bool = True,
    ) -> models.BusinessClaim:
        for key, value in changes.items():
            setattr(claim, key, value)
        claim.updated_at = datetime.utcnow()
        if commit:
            self.session.commit()
            self.session.refresh(claim)
        return claim

    async def reject_open_for_business(
        self,
        business_id: str,
        exclude_claim_id: str,
        statuses: Sequence[ClaimStatus],
        admin_notes: Optional[str] = None,
    ) -> int:
        """Reject other claims in ``statuses`` on a business; the caller commits."""
        return (
            self.session.query(models.BusinessClaim)
            .filter(
                models.BusinessClaim.business_id == business_id,
                models.BusinessClaim.id != exclude_claim_id,
                models.BusinessClaim.status.in_(statuses),
            )
            .update(
                {
                    models.BusinessClaim.status: ClaimStatus.REJECTED,
                    models.BusinessClaim.admin_notes: admin_notes,
                    models.BusinessClaim.verification_code: None,
                    models.BusinessClaim.code_expires_at: None,
                    models.BusinessClaim.updated_at: datetime.utcnow(),
                },
                synchronize_session="fetch",
            )
        )

    def commit(self) -> None:
        self.session.commit()
