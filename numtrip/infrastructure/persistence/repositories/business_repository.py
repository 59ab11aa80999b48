"""SQLAlchemy repository for businesses."""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from numtrip.domain.enums import BusinessCategory
from numtrip.infrastructure.persistence import models


class SQLAlchemyBusinessRepository:
    """Business repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, business_id: str) -> Optional[models.Business]:
        return self.session.get(models.Business, business_id)

    async def search(
        self,
        query: Optional[str] = None,
        city: Optional[str] = None,
        category: Optional[BusinessCategory] = None,
        verified: Optional[bool] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[models.Business], int]:
        """Filtered page of businesses plus the total match count.

        Ordered verified first, then newest first.
        """
        q = self.session.query(models.Business)
        if query:
            needle = query.lower()
            q = q.filter(
                or_(
                    func.lower(models.Business.name).contains(needle, autoescape=True),
                    func.lower(models.Business.description).contains(needle, autoescape=True),
                )
            )
        if city:
            q = q.filter(func.lower(models.Business.city) == city.lower())
        if category is not None:
            q = q.filter(models.Business.category == category)
        if verified is not None:
            q = q.filter(models.Business.verified.is_(verified))

        total = q.count()
        rows = (
            q.order_by(models.Business.verified.desc(), models.Business.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return rows, total

    async def find_by_name_fragment(self, fragment: str, limit: int = 50) -> List[models.Business]:
        """Businesses whose name contains every word of the fragment."""
        q = self.session.query(models.Business)
        for word in fragment.split():
            q = q.filter(func.lower(models.Business.name).contains(word.lower(), autoescape=True))
        return q.limit(limit).all()

    async def list_slug_candidates(self, verified: Optional[bool], limit: int) -> List[models.Business]:
        """A capped slice of businesses carrying the slug's verification flag."""
        q = self.session.query(models.Business)
        if verified is not None:
            q = q.filter(models.Business.verified.is_(verified))
        return q.order_by(models.Business.created_at.desc()).limit(limit).all()

    async def list_owned_by(self, user_id: str) -> List[models.Business]:
        return (
            self.session.query(models.Business)
            .filter(models.Business.owner_id == user_id)
            .order_by(models.Business.name)
            .all()
        )

    async def create(self, data: Dict[str, Any]) -> models.Business:
        row = models.Business(**data)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    async def update(self, business: models.Business, changes: Dict[str, Any]) -> models.Business:
        for key, value in changes.items():
            setattr(business, key, value)
        business.updated_at = datetime.utcnow()
        self.session.commit()
        self.session.refresh(business)
        return business

    async def assign_owner(
        self,
        business: models.Business,
        user_id: str,
        mark_verified: bool = False,
        commit: bool = True,
    ) -> models.Business:
        business.owner_id = user_id
        business.claimed_at = datetime.utcnow()
        business.updated_at = business.claimed_at
        if mark_verified:
            business.verified = True
        if commit:
            self.session.commit()
            self.session.refresh(business)
        return business
