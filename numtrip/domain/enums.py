"""Enumerations shared across the domain."""
from enum import Enum


class BusinessCategory(str, Enum):
    HOTEL = "HOTEL"
    RESTAURANT = "RESTAURANT"
    TOUR = "TOUR"
    TRANSPORT = "TRANSPORT"
    ATTRACTION = "ATTRACTION"
    OTHER = "OTHER"


# Categories a visitor can actually contact (used for sitemap and IndexNow)
CONTACTABLE_CATEGORIES = frozenset(
    {
        BusinessCategory.HOTEL,
        BusinessCategory.RESTAURANT,
        BusinessCategory.TOUR,
        BusinessCategory.TRANSPORT,
    }
)


class ValidationType(str, Enum):
    PHONE_WORKS = "PHONE_WORKS"
    PHONE_INCORRECT = "PHONE_INCORRECT"
    EMAIL_WORKS = "EMAIL_WORKS"
    EMAIL_INCORRECT = "EMAIL_INCORRECT"
    WHATSAPP_WORKS = "WHATSAPP_WORKS"
    WHATSAPP_INCORRECT = "WHATSAPP_INCORRECT"
    GENERAL_CORRECT = "GENERAL_CORRECT"
    GENERAL_INCORRECT = "GENERAL_INCORRECT"

    @property
    def channel(self) -> str:
        """Contact channel the validation refers to: phone, email, whatsapp or general."""
        return self.value.split("_", 1)[0].lower()


VALIDATION_CHANNELS = ("phone", "email", "whatsapp", "general")


class ClaimStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class VerificationType(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"
    PHONE_CALL = "PHONE_CALL"


class TrustLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERIFIED = "VERIFIED"


class Locale(str, Enum):
    ES = "es"
    EN = "en"


LOCALES = (Locale.ES, Locale.EN)
