"""Sitemaps and robots.txt for search engines."""
import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from numtrip.config import Settings, get_settings
from numtrip.infrastructure.persistence.db import get_db
from numtrip.services.seo import build_robots_txt
from numtrip.services.sitemap_generator import SitemapGenerator, SitemapUrl

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sitemap"])

FALLBACK_CACHE_TTL = 300


def _xml_response(content: str, max_age: int) -> Response:
    return Response(
        content=content,
        media_type="application/xml",
        headers={"Cache-Control": f"public, max-age={max_age}"}
    )


def _static_fallback(generator: SitemapGenerator) -> Response:
    """Minimal sitemap with just the home page."""
    fallback_urls: List[SitemapUrl] = generator.generate_static_urls()[:1]
    return _xml_response(generator.generate_sitemap_xml(fallback_urls), FALLBACK_CACHE_TTL)


@router.get("/sitemap.xml")
async def generate_sitemap(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """Combined sitemap: static pages plus every listed business, both locales."""
    generator = SitemapGenerator(settings.site_url)

    try:
        urls = generator.generate_static_urls() + generator.generate_business_urls(db)
        sitemap_xml = generator.generate_sitemap_xml(urls)

        logger.info(f"Generated sitemap with {len(urls)} URLs")
        return _xml_response(sitemap_xml, settings.SITEMAP_CACHE_TTL)

    except Exception as e:
        logger.error(f"Error generating sitemap: {e}")
        return _static_fallback(generator)


@router.get("/sitemap-index.xml")
async def generate_sitemap_index(settings: Settings = Depends(get_settings)):
    """Generate the sitemap index."""
    generator = SitemapGenerator(settings.site_url)
    sitemaps = generator.get_sitemap_list()
    sitemap_index_xml = generator.generate_sitemap_index_xml(sitemaps)

    logger.info(f"Generated sitemap index with {len(sitemaps)} sitemaps")
    return _xml_response(sitemap_index_xml, settings.SITEMAP_INDEX_CACHE_TTL)


@router.get("/sitemap-static.xml")
async def generate_static_sitemap(settings: Settings = Depends(get_settings)):
    """Generate sitemap for static pages."""
    generator = SitemapGenerator(settings.site_url)
    static_urls = generator.generate_static_urls()

    logger.info(f"Generated static sitemap with {len(static_urls)} pages")
    return _xml_response(generator.generate_sitemap_xml(static_urls), settings.SITEMAP_CACHE_TTL)


@router.get("/sitemap-businesses.xml")
async def generate_businesses_sitemap(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """Generate sitemap for business pages."""
    generator = SitemapGenerator(settings.site_url)

    try:
        business_urls = generator.generate_business_urls(db)
        sitemap_xml = generator.generate_sitemap_xml(business_urls)

        logger.info(f"Generated businesses sitemap with {len(business_urls)} URLs")
        return _xml_response(sitemap_xml, settings.SITEMAP_CACHE_TTL)

    except Exception as e:
        logger.error(f"Error generating businesses sitemap: {e}")
        return _xml_response(generator.generate_sitemap_xml([]), FALLBACK_CACHE_TTL)


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(settings: Settings = Depends(get_settings)):
    return PlainTextResponse(
        build_robots_txt(settings.site_url),
        headers={"Cache-Control": f"public, max-age={settings.ROBOTS_CACHE_TTL}"},
    )
