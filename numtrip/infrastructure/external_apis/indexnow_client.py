"""Client for the IndexNow search-engine ping API."""
import logging
from typing import List, Optional

import httpx

from numtrip.infrastructure.external_apis.http_client import get_shared_client

logger = logging.getLogger(__name__)

UPSTREAM_ERROR_MESSAGES = {
    400: "Invalid request format",
    403: "Invalid IndexNow key",
    422: "URLs do not match the host",
    429: "Too many requests - please try again later",
}
DEFAULT_UPSTREAM_ERROR = "Failed to submit URLs to IndexNow"


class IndexNowSubmissionError(Exception):
    """IndexNow answered with a non-2xx status."""

    def __init__(self, status_code: int, upstream_body: str = ""):
        self.status_code = status_code
        self.message = UPSTREAM_ERROR_MESSAGES.get(status_code, DEFAULT_UPSTREAM_ERROR)
        self.upstream_body = upstream_body
        super().__init__(self.message)


class IndexNowClient:
    """Submits URL lists to IndexNow for one host."""

    def __init__(self, key: str, api_url: str, client: Optional[httpx.AsyncClient] = None):
        self.key = key
        self.api_url = api_url
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client or get_shared_client()

    def key_location(self, host: str) -> str:
        return f"https://{host}/{self.key}.txt"

    def build_payload(self, host: str, urls: List[str]) -> dict:
        return {
            "host": host,
            "key": self.key,
            "keyLocation": self.key_location(host),
            "urlList": list(urls),
        }

    async def submit(self, host: str, urls: List[str]) -> int:
        """POST the URL list.

        Returns:
            The upstream status code (200 or 202 on success)

        Raises:
            IndexNowSubmissionError: upstream rejected the submission
            httpx.HTTPError: transport failure
        """
        response = await self.client.post(
            self.api_url,
            json=self.build_payload(host, urls),
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        if response.status_code >= 400:
            logger.error(f"IndexNow submission error: {response.status_code} {response.text[:200]}")
            raise IndexNowSubmissionError(response.status_code, response.text)

        logger.info(f"Submitted {len(urls)} URL(s) to IndexNow for {host}")
        return response.status_code
