"""Process-wide httpx client for outbound calls (IndexNow, identity provider)."""
import httpx
import logging
from typing import Optional

from numtrip.config import get_settings

logger = logging.getLogger(__name__)

USER_AGENT = "NumTrip-Backend/0.1 (+https://numtrip.com)"

_shared_client: Optional[httpx.AsyncClient] = None


def build_client(**overrides) -> httpx.AsyncClient:
    settings = get_settings()
    options = {
        "timeout": httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS),
        "limits": httpx.Limits(
            max_connections=settings.HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE,
        ),
        "headers": {"User-Agent": USER_AGENT},
    }
    options.update(overrides)
    return httpx.AsyncClient(**options)


def get_shared_client() -> httpx.AsyncClient:
    """Return the pooled client, opening it on first use (or after close)."""
    global _shared_client

    if _shared_client is None or _shared_client.is_closed:
        _shared_client = build_client()
        logger.info(f"Outbound HTTP client opened ({USER_AGENT})")

    return _shared_client


async def close_shared_client():
    global _shared_client

    if _shared_client is not None:
        await _shared_client.aclose()
        _shared_client = None
        logger.info("Outbound HTTP client closed")
