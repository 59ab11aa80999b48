"""SQLAlchemy repository for promo codes."""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from numtrip.infrastructure.persistence import models


class SQLAlchemyPromoCodeRepository:
    """Promo code repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def get_for_business(self, promo_id: str, business_id: str) -> Optional[models.PromoCode]:
        return (
            self.session.query(models.PromoCode)
            .filter(models.PromoCode.id == promo_id, models.PromoCode.business_id == business_id)
            .first()
        )

    async def get_by_code(self, business_id: str, code: str) -> Optional[models.PromoCode]:
        return (
            self.session.query(models.PromoCode)
            .filter(models.PromoCode.business_id == business_id, models.PromoCode.code == code)
            .first()
        )

    async def list_for_business(self, business_id: str) -> List[models.PromoCode]:
        return (
            self.session.query(models.PromoCode)
            .filter(models.PromoCode.business_id == business_id)
            .order_by(models.PromoCode.created_at.desc())
            .all()
        )

    async def list_valid(self, business_id: str, now: datetime) -> List[models.PromoCode]:
        """Active, unexpired codes that are still under their usage cap."""
        return (
            self.session.query(models.PromoCode)
            .filter(
                models.PromoCode.business_id == business_id,
                models.PromoCode.active.is_(True),
                or_(models.PromoCode.valid_until.is_(None), models.PromoCode.valid_until > now),
                or_(
                    models.PromoCode.max_usage.is_(None),
                    models.PromoCode.usage_count < models.PromoCode.max_usage,
                ),
            )
            .order_by(models.PromoCode.created_at.desc())
            .all()
        )

    async def list_expiring(self, business_id: str, now: datetime, until: datetime) -> List[models.PromoCode]:
        return (
            self.session.query(models.PromoCode)
            .filter(
                models.PromoCode.business_id == business_id,
                models.PromoCode.active.is_(True),
                models.PromoCode.valid_until.isnot(None),
                models.PromoCode.valid_until > now,
                models.PromoCode.valid_until <= until,
            )
            .order_by(models.PromoCode.valid_until)
            .all()
        )

    async def total_usage(self, business_id: str) -> int:
        return (
            self.session.query(func.coalesce(func.sum(models.PromoCode.usage_count), 0))
            .filter(models.PromoCode.business_id == business_id)
            .scalar()
            or 0
        )

    async def create(self, data: Dict[str, Any]) -> models.PromoCode:
        row = models.PromoCode(**data)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    async def update(self, promo: models.PromoCode, changes: Dict[str, Any]) -> models.PromoCode:
        for key, value in changes.items():
            setattr(promo, key, value)
        promo.updated_at = datetime.utcnow()
        self.session.commit()
        self.session.refresh(promo)
        return promo

    async def redeem(self, promo: models.PromoCode, now: datetime) -> bool:
        """Count one use only while the code is still redeemable.

        Availability and the increment are a single UPDATE, so concurrent
        redemptions cannot push usage_count past max_usage.
        """
        updated = (
            self.session.query(models.PromoCode)
            .filter(
                models.PromoCode.id == promo.id,
                models.PromoCode.active.is_(True),
                or_(models.PromoCode.valid_until.is_(None), models.PromoCode.valid_until > now),
                or_(
                    models.PromoCode.max_usage.is_(None),
                    models.PromoCode.usage_count < models.PromoCode.max_usage,
                ),
            )
            .update(
                {
                    models.PromoCode.usage_count: models.PromoCode.usage_count + 1,
                    models.PromoCode.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        self.session.refresh(promo)
        return updated == 1
