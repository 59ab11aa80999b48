"""IndexNow submissions: on-demand, per-business pings and bulk batches."""
import asyncio
import logging
from typing import List, Optional
from urllib.parse import urlparse

import httpx

from numtrip.domain.enums import LOCALES
from numtrip.infrastructure.external_apis.indexnow_client import (
    IndexNowClient,
    IndexNowSubmissionError,
)
from numtrip.services.seo import business_slugs
from numtrip.services.sitemap_generator import business_url

logger = logging.getLogger(__name__)


class IndexNowService:
    """Thin policy layer over IndexNowClient.

    ``client`` is None when no INDEXNOW_KEY is configured.
    """

    def __init__(self, client: Optional[IndexNowClient], site_url: str, batch_size: int = 100):
        self.client = client
        self.site_url = site_url.rstrip("/")
        self.batch_size = batch_size

    @property
    def configured(self) -> bool:
        return self.client is not None

    @property
    def key(self) -> Optional[str]:
        return self.client.key if self.client else None

    @property
    def site_host(self) -> str:
        return urlparse(self.site_url).hostname or ""

    def business_urls(self, business) -> List[str]:
        slugs = business_slugs(business)
        return [business_url(self.site_url, locale, slugs[locale]) for locale in LOCALES]

    async def submit(self, host: str, urls: List[str]) -> int:
        """Submit as-is; errors propagate to the caller."""
        return await self.client.submit(host, urls)

    async def ping_urls(self, urls: List[str]) -> bool:
        """Best-effort notification used from background tasks. Never raises."""
        if not self.configured or not urls:
            return False
        try:
            await self.client.submit(self.site_host, urls)
            return True
        except (IndexNowSubmissionError, httpx.HTTPError) as e:
            logger.warning(f"IndexNow ping failed for {len(urls)} URL(s): {e}")
            return False

    async def submit_in_batches(self, urls: List[str], pause_seconds: float = 1.0) -> int:
        """Submit a long URL list in batches; returns how many batches succeeded."""
        succeeded = 0
        batches = [urls[i:i + self.batch_size] for i in range(0, len(urls), self.batch_size)]
        for index, batch in enumerate(batches, start=1):
            logger.info(f"Submitting batch {index}/{len(batches)} ({len(batch)} URLs)")
            if await self.ping_urls(batch):
                succeeded += 1
            if index < len(batches):
                await asyncio.sleep(pause_seconds)
        return succeeded
