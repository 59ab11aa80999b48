"""IndexNow webhook and key file.

Responses use a flat ``{"error": ...}`` body rather than the API error
envelope, since search-engine tooling and the frontend read that shape.
"""
import logging
from json import JSONDecodeError

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from numtrip.application.services.indexnow_service import IndexNowService
from numtrip.core.dependencies import get_indexnow_service
from numtrip.core.errors import NotFoundError
from numtrip.infrastructure.external_apis.indexnow_client import IndexNowSubmissionError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["indexnow"])


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/api/indexnow")
async def submit_urls(request: Request, service: IndexNowService = Depends(get_indexnow_service)):
    """Forward a list of changed URLs to IndexNow.

    Body: ``{"urls": ["https://...", ...]}``. The submission host is the
    host this request was addressed to.
    """
    if not service.configured:
        logger.error("IndexNow key not configured")
        return _error("IndexNow key not configured", 500)

    try:
        body = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return _error("Invalid URLs provided", 400)

    urls = body.get("urls") if isinstance(body, dict) else None
    if not isinstance(urls, list) or not urls:
        return _error("Invalid URLs provided", 400)

    host = request.url.hostname
    try:
        await service.submit(host, urls)
    except IndexNowSubmissionError as e:
        return _error(e.message, e.status_code)
    except httpx.HTTPError as e:
        logger.error(f"Error submitting to IndexNow: {e}")
        return _error("Internal server error", 500)

    return {
        "success": True,
        "message": f"Successfully submitted {len(urls)} URL(s) to IndexNow",
        "urls": urls,
    }


@router.get("/api/indexnow")
async def indexnow_status(service: IndexNowService = Depends(get_indexnow_service)):
    if not service.configured:
        return _error("IndexNow not configured", 500)
    return {"configured": True, "keyFile": f"/{service.key}.txt"}


@router.get("/{key}.txt", response_class=PlainTextResponse)
async def indexnow_key_file(key: str, service: IndexNowService = Depends(get_indexnow_service)):
    """Serve the ownership key file search engines fetch from keyLocation."""
    if not service.configured or key != service.key:
        raise NotFoundError("File")
    return PlainTextResponse(service.key)
