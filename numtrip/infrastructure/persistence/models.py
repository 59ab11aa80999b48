"""SQLAlchemy models for the NumTrip tables."""
import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Boolean,
    Float,
    Integer,
    Text,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from numtrip.domain.enums import (
    BusinessCategory,
    ClaimStatus,
    ValidationType,
    VerificationType,
)
from numtrip.infrastructure.persistence.db import Base


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    phone = Column(String(32))
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    businesses = relationship("Business", back_populates="owner")
    validations = relationship("Validation", back_populates="user")
    claims = relationship("BusinessClaim", back_populates="user")


class Business(Base):
    __tablename__ = "businesses"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    category = Column(Enum(BusinessCategory), nullable=False, index=True)
    city = Column(String(50), nullable=False, index=True)
    address = Column(String(200))
    latitude = Column(Float)
    longitude = Column(Float)
    phone = Column(String(20))
    email = Column(String(255))
    whatsapp = Column(String(20))
    website = Column(String(512))
    google_place_id = Column(String(255), unique=True)
    verified = Column(Boolean, nullable=False, default=False, index=True)
    active = Column(Boolean, nullable=False, default=True)
    owner_id = Column(String(36), ForeignKey("users.id"), index=True)
    claimed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="businesses")
    validations = relationship("Validation", back_populates="business")
    promo_codes = relationship("PromoCode", back_populates="business")
    claims = relationship("BusinessClaim", back_populates="business")


class Validation(Base):
    """Community report about one business contact. Rows are never updated."""

    __tablename__ = "validations"

    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(Enum(ValidationType), nullable=False)
    is_correct = Column(Boolean, nullable=False)
    comment = Column(String(500))
    business_id = Column(String(36), ForeignKey("businesses.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), index=True)
    ip_address = Column(String(64))
    user_agent = Column(String(512))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    business = relationship("Business", back_populates="validations")
    user = relationship("User", back_populates="validations")
    responses = relationship("ValidationResponse", back_populates="validation", order_by="ValidationResponse.created_at")


class ValidationResponse(Base):
    __tablename__ = "validation_responses"

    id = Column(String(36), primary_key=True, default=new_id)
    validation_id = Column(String(36), ForeignKey("validations.id"), nullable=False, index=True)
    business_id = Column(String(36), ForeignKey("businesses.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    response = Column(String(1000), nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    validation = relationship("Validation", back_populates="responses")


class PromoCode(Base):
    __tablename__ = "promo_codes"
    __table_args__ = (UniqueConstraint("business_id", "code", name="uq_promo_codes_business_code"),)

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String(20), nullable=False)
    description = Column(String(200), nullable=False)
    discount = Column(String(50), nullable=False)
    valid_until = Column(DateTime)
    active = Column(Boolean, nullable=False, default=True)
    usage_count = Column(Integer, nullable=False, default=0)
    max_usage = Column(Integer)
    business_id = Column(String(36), ForeignKey("businesses.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    business = relationship("Business", back_populates="promo_codes")


class BusinessClaim(Base):
    __tablename__ = "business_claims"
    __table_args__ = (UniqueConstraint("business_id", "user_id", name="uq_business_claims_business_user"),)

    id = Column(String(36), primary_key=True, default=new_id)
    business_id = Column(String(36), ForeignKey("businesses.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(Enum(ClaimStatus), nullable=False, default=ClaimStatus.PENDING)
    verification_type = Column(Enum(VerificationType), nullable=False)
    contact_value = Column(String(255), nullable=False)
    verification_code = Column(String(6))
    code_expires_at = Column(DateTime)
    claim_reason = Column(String(500))
    admin_notes = Column(String(1000))
    ip_address = Column(String(64))
    user_agent = Column(String(512))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    verified_at = Column(DateTime)
    approved_at = Column(DateTime)

    business = relationship("Business", back_populates="claims")
    user = relationship("User", back_populates="claims")
