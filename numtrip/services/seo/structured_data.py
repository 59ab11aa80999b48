"""JSON-LD (schema.org) documents for the site and business pages."""
import re
from typing import Any, Dict, Optional, Union

from numtrip.config import get_settings
from numtrip.domain.enums import BusinessCategory, Locale
from numtrip.domain.value_objects.coordinates import Coordinates

SCHEMA_CONTEXT = "https://schema.org"
SITE_NAME = "NumTrip"

BUSINESS_SCHEMA_TYPES = {
    BusinessCategory.HOTEL: "Hotel",
    BusinessCategory.RESTAURANT: "Restaurant",
    BusinessCategory.TOUR: "TouristAttraction",
    BusinessCategory.TRANSPORT: "TaxiService",
}

SERVICE_NAMES = {
    BusinessCategory.HOTEL: "Alojamiento",
    BusinessCategory.RESTAURANT: "Comidas",
    BusinessCategory.TOUR: "Tours y Actividades",
    BusinessCategory.TRANSPORT: "Transporte",
}

FALLBACK_DESCRIPTIONS = {
    Locale.ES: "Información de contacto para {name} en {city}",
    Locale.EN: "Contact information for {name} in {city}",
}


def _drop_none(value: Any) -> Any:
    """Recursively remove keys whose value is None."""
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value]
    return value


def whatsapp_link(number: Optional[str]) -> Optional[str]:
    digits = re.sub(r"\D", "", number or "")
    return f"https://wa.me/{digits}" if digits else None


def website_schema() -> Dict[str, Any]:
    site_url = get_settings().site_url
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": SITE_NAME,
        "description": "Directorio verificado de contactos turísticos en Cartagena, Colombia",
        "url": site_url,
        "potentialAction": {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{site_url}/search?q={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        },
        "publisher": {"@type": "Organization", "name": SITE_NAME, "url": site_url},
        "inLanguage": ["es-ES", "en-US"],
    }


def organization_schema() -> Dict[str, Any]:
    site_url = get_settings().site_url
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": SITE_NAME,
        "description": "Directorio verificado de contactos turísticos",
        "url": site_url,
        "logo": f"{site_url}/logo.png",
        "contactPoint": {
            "@type": "ContactPoint",
            "contactType": "customer service",
            "availableLanguage": ["Spanish", "English"],
        },
        "areaServed": {"@type": "City", "name": "Cartagena", "addressCountry": "CO"},
        "serviceType": "Tourism Directory",
    }


def business_schema(business, locale: Union[Locale, str] = Locale.ES) -> Dict[str, Any]:
    """Build the page JSON-LD for one business.

    Args:
        business: ORM row or any object with the business attributes
        locale: Language used for the fallback description

    Returns:
        JSON-serializable dict with null fields removed
    """
    locale = Locale(locale)
    category = BusinessCategory(business.category)

    description = business.description or FALLBACK_DESCRIPTIONS[locale].format(
        name=business.name, city=business.city
    )

    coordinates = Coordinates.from_optional(business.latitude, business.longitude)
    geo = coordinates.as_geo() if coordinates else None

    wa_link = whatsapp_link(business.whatsapp)

    schema = {
        "@context": SCHEMA_CONTEXT,
        "@type": BUSINESS_SCHEMA_TYPES.get(category, "LocalBusiness"),
        "name": business.name,
        "description": description,
        "address": {
            "@type": "PostalAddress",
            "streetAddress": business.address,
            "addressLocality": business.city,
            "addressCountry": "CO",
        },
        "telephone": business.phone,
        "email": business.email,
        "url": business.website,
        "priceRange": "$$" if category == BusinessCategory.HOTEL else "$",
        "geo": geo,
        "hasOfferCatalog": {
            "@type": "OfferCatalog",
            "name": "Servicios",
            "itemListElement": [
                {
                    "@type": "Offer",
                    "itemOffered": {
                        "@type": "Service",
                        "name": SERVICE_NAMES.get(category, "Servicios"),
                    },
                }
            ],
        },
        "contactPoint": [
            {
                "@type": "ContactPoint",
                "telephone": business.phone,
                "contactType": "customer service",
                "availableLanguage": ["Spanish", "English"],
            }
        ],
        "sameAs": [wa_link] if wa_link else [],
    }
    return _drop_none(schema)
