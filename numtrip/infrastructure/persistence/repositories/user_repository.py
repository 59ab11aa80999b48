"""SQLAlchemy repository for local user records."""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from numtrip.infrastructure.external_apis.supabase_auth_client import IdentityUser
from numtrip.infrastructure.persistence import models


class SQLAlchemyUserRepository:
    """User repository using SQLAlchemy."""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[models.User]:
        return self.session.get(models.User, user_id)

    async def get_by_email(self, email: str) -> Optional[models.User]:
        return self.session.query(models.User).filter(models.User.email == email).first()

    async def upsert_identity(self, identity: IdentityUser) -> models.User:
        """Mirror an identity-provider user into the users table.

        Matches by provider id first, then by email.
        """
        row = await self.get_by_id(identity.id)
        if row is None and identity.email:
            row = await self.get_by_email(identity.email)

        if row is None:
            row = models.User(
                id=identity.id,
                email=identity.email,
                name=identity.name,
                phone=identity.phone,
                verified=identity.email_confirmed,
            )
            self.session.add(row)
        else:
            row.email = identity.email or row.email
            row.name = identity.name or row.name
            row.phone = identity.phone or row.phone
            row.verified = row.verified or identity.email_confirmed
            row.updated_at = datetime.utcnow()

        self.session.commit()
        self.session.refresh(row)
        return row
