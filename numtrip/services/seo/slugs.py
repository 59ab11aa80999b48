"""Locale-aware business slugs.

A slug reads ``<prefix>-<name>[-<city>]-<status>``, e.g.
``contacto-de-hotel-plaza-cartagena-verificado`` or
``contact-for-hotel-plaza-cartagena-verified``.
"""
import re
import unicodedata
from dataclasses import dataclass
from typing import Optional, Union

from numtrip.domain.enums import Locale

_INVALID_CHARS = re.compile(r"[^a-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

SLUG_PREFIXES = {
    Locale.ES: "contacto-de",
    Locale.EN: "contact-for",
}

# (verified, not verified)
SLUG_STATUS = {
    Locale.ES: ("verificado", "no-verificado"),
    Locale.EN: ("verified", "not-verified"),
}


@dataclass(frozen=True)
class ParsedSlug:
    name_fragment: str
    verified: Optional[bool]
    locale: Locale


def slugify(text: Optional[str]) -> str:
    """Normalize free text into ``[a-z0-9-]`` with no edge hyphens."""
    if not text:
        return ""
    normalized = unicodedata.normalize("NFD", text.lower().strip())
    stripped = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    cleaned = _INVALID_CHARS.sub("", stripped)
    return _SEPARATORS.sub("-", cleaned).strip("-")


def _has_city(city: Optional[str]) -> bool:
    return bool(city and city.strip() and city.strip().lower() != "unknown")


def generate_business_slug(
    name: str,
    city: Optional[str],
    verified: bool,
    locale: Union[Locale, str] = Locale.ES,
) -> str:
    locale = Locale(locale)
    parts = [SLUG_PREFIXES[locale], slugify(name)]
    if _has_city(city):
        parts.append(slugify(city))
    verified_label, unverified_label = SLUG_STATUS[locale]
    parts.append(verified_label if verified else unverified_label)
    return "-".join(part for part in parts if part)


def business_slugs(business) -> dict:
    """Both locale slugs for an object exposing name, city and verified."""
    return {
        locale: generate_business_slug(business.name, business.city, bool(business.verified), locale)
        for locale in Locale
    }


def parse_business_slug(slug: str) -> Optional[ParsedSlug]:
    """Split a slug back into name fragment, verification flag and locale.

    The city, when present, stays inside ``name_fragment``; callers match
    candidates by regenerating their slugs. Returns None when the slug does
    not start with a known prefix or carries no name.
    """
    if not slug:
        return None

    for locale, prefix in SLUG_PREFIXES.items():
        if slug.startswith(prefix + "-"):
            rest = slug[len(prefix) + 1:]
            break
    else:
        return None

    verified_label, unverified_label = SLUG_STATUS[locale]
    verified = None
    if rest.endswith("-" + unverified_label):
        verified = False
        rest = rest[: -len(unverified_label) - 1]
    elif rest.endswith("-" + verified_label):
        verified = True
        rest = rest[: -len(verified_label) - 1]

    words = [w for w in rest.split("-") if w]
    if not words:
        return None
    return ParsedSlug(name_fragment=" ".join(words), verified=verified, locale=locale)
