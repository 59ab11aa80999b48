"""SQLAlchemy repository for validations and owner responses.

Validations are append-only: rows are created and read, never updated or deleted.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from numtrip.domain.enums import ValidationType
from numtrip.infrastructure.persistence import models


class SQLAlchemyValidationRepository:
    """Validation repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def create(self, data: Dict[str, Any]) -> models.Validation:
        row = models.Validation(**data)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    async def count_by_type(self, business_id: str) -> List[Tuple[ValidationType, bool, int]]:
        """Rows of (type, is_correct, count) for one business."""
        return (
            self.session.query(
                models.Validation.type,
                models.Validation.is_correct,
                func.count(models.Validation.id),
            )
            .filter(models.Validation.business_id == business_id)
            .group_by(models.Validation.type, models.Validation.is_correct)
            .all()
        )

    async def last_created_at(self, business_id: str) -> Optional[datetime]:
        return (
            self.session.query(func.max(models.Validation.created_at))
            .filter(models.Validation.business_id == business_id)
            .scalar()
        )

    async def count_between(
        self,
        business_id: str,
        start: datetime,
        end: datetime,
        is_correct: Optional[bool] = None,
    ) -> int:
        q = self.session.query(func.count(models.Validation.id)).filter(
            models.Validation.business_id == business_id,
            models.Validation.created_at >= start,
            models.Validation.created_at < end,
        )
        if is_correct is not None:
            q = q.filter(models.Validation.is_correct.is_(is_correct))
        return q.scalar() or 0

    async def history(
        self,
        business_id: str,
        skip: int = 0,
        limit: int = 10,
        validation_type: Optional[ValidationType] = None,
    ) -> Tuple[List[models.Validation], int]:
        q = self.session.query(models.Validation).filter(models.Validation.business_id == business_id)
        if validation_type is not None:
            q = q.filter(models.Validation.type == validation_type)
        total = q.count()
        rows = (
            q.order_by(models.Validation.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return rows, total

    async def recent_with_responses(self, business_id: str, limit: int) -> List[models.Validation]:
        return (
            self.session.query(models.Validation)
            .options(selectinload(models.Validation.responses))
            .filter(models.Validation.business_id == business_id)
            .order_by(models.Validation.created_at.desc())
            .limit(limit)
            .all()
        )

    async def get_for_business(self, validation_id: str, business_id: str) -> Optional[models.Validation]:
        return (
            self.session.query(models.Validation)
            .filter(
                models.Validation.id == validation_id,
                models.Validation.business_id == business_id,
            )
            .first()
        )

    async def count_answered(self, business_id: str) -> int:
        """Validations that have at least one owner response."""
        return (
            self.session.query(func.count(func.distinct(models.ValidationResponse.validation_id)))
            .filter(models.ValidationResponse.business_id == business_id)
            .scalar()
            or 0
        )

    async def add_response(self, data: Dict[str, Any]) -> models.ValidationResponse:
        row = models.ValidationResponse(**data)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row
