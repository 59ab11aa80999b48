"""Filter for monuments, plazas and other places nobody can contact."""
from typing import Iterable, List, Optional

from numtrip.domain.enums import CONTACTABLE_CATEGORIES, BusinessCategory

EXCLUDED_LANDMARK_KEYWORDS = (
    # Monuments and statues
    "monumento", "monument", "estatua", "statue",
    # Public spaces
    "plaza", "parque", "park", "malecon", "camellon",
    # Religious and historical sites
    "museo", "museum", "catedral", "cathedral", "iglesia", "church",
    "basilica", "convento", "convent", "castillo", "castle",
    "fortaleza", "fort", "murallas", "walls", "torre", "tower",
    "puerta", "gate", "cementerio",
    # Geography
    "bahia", "bay", "muelle", "puerto", "port",
    # Cartagena landmarks
    "getsemani", "getsemaní", "alcatraces", "pegasos", "aduana",
    "india catalina", "bolivar", "bolívar", "santo domingo",
    "los coches", "san pedro claver", "santa cruz", "popa",
    "oro zenu", "zenú", "martires", "mártires", "oceanos",
    "océanos", "union", "unión", "reloj", "barajas",
)


def is_landmark(name: str, description: Optional[str] = None, address: Optional[str] = None) -> bool:
    """True when any excluded keyword appears in name, description or address."""
    haystacks = [(text or "").lower() for text in (name, description, address)]
    return any(keyword in text for keyword in EXCLUDED_LANDMARK_KEYWORDS for text in haystacks)


def is_contactable(business) -> bool:
    """Contactable category and not a landmark."""
    category = BusinessCategory(business.category)
    if category not in CONTACTABLE_CATEGORIES:
        return False
    return not is_landmark(business.name, business.description, business.address)


def filter_contactable(businesses: Iterable) -> List:
    return [b for b in businesses if is_contactable(b)]
