"""Sitemap generation service following sitemaps.org 0.9 with hreflang alternates."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import xml.sax.saxutils as saxutils

from sqlalchemy.orm import Session

from numtrip.config import get_settings
from numtrip.domain.enums import LOCALES, Locale
from numtrip.infrastructure.persistence import models
from numtrip.services.seo import business_slugs, is_contactable

logger = logging.getLogger(__name__)


@dataclass
class SitemapUrl:
    """Represents a single URL in a sitemap."""
    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[str] = None
    # hreflang -> href
    alternates: Dict[str, str] = field(default_factory=dict)


@dataclass
class StaticPage:
    """Represents a static page configuration."""
    path: str
    priority: str
    changefreq: str
    localized: bool = True


def business_url(site_url: str, locale: Locale, slug: str) -> str:
    return f"{site_url}/{Locale(locale).value}/business/{slug}"


class SitemapGenerator:
    """Builds static and business sitemaps plus the sitemap index."""

    def __init__(self, site_url: Optional[str] = None):
        self.site_url = (site_url or get_settings().site_url).rstrip('/')
        self.static_pages = self._define_static_pages()

    def _define_static_pages(self) -> List[StaticPage]:
        return [
            StaticPage(path="", priority="1.0", changefreq="daily", localized=False),
            StaticPage(path="", priority="1.0", changefreq="daily"),
            StaticPage(path="/search", priority="0.8", changefreq="daily"),
            StaticPage(path="/contact", priority="0.7", changefreq="monthly"),
            StaticPage(path="/cookie-preferences", priority="0.3", changefreq="yearly"),
        ]

    def format_date(self, date_obj: Optional[datetime]) -> str:
        """Format date for sitemap lastmod field."""
        if date_obj:
            return date_obj.strftime('%Y-%m-%d')
        return datetime.utcnow().strftime('%Y-%m-%d')

    def escape_xml(self, text: str) -> str:
        """Escape XML special characters, quotes included."""
        return saxutils.escape(text, {'"': "&quot;", "'": "&apos;"})

    def generate_static_urls(self) -> List[SitemapUrl]:
        """Generate URLs for static pages in every locale."""
        today = self.format_date(None)
        urls = []
        for page in self.static_pages:
            if not page.localized:
                urls.append(SitemapUrl(
                    loc=self.site_url + (page.path or "/"),
                    lastmod=today,
                    changefreq=page.changefreq,
                    priority=page.priority,
                ))
                continue
            localized = {locale.value: f"{self.site_url}/{locale.value}{page.path}" for locale in LOCALES}
            for locale in LOCALES:
                urls.append(SitemapUrl(
                    loc=localized[locale.value],
                    lastmod=today,
                    changefreq=page.changefreq,
                    priority=page.priority,
                    alternates=localized,
                ))
        return urls

    def list_sitemap_businesses(self, db: Session) -> List[models.Business]:
        """Active businesses that are contactable and not landmarks."""
        rows = (
            db.query(models.Business)
            .filter(models.Business.active.is_(True))
            .order_by(models.Business.created_at.desc())
            .all()
        )
        return [row for row in rows if is_contactable(row)]

    def generate_business_urls(self, db: Session) -> List[SitemapUrl]:
        """Generate both locale URLs for every sitemap-eligible business."""
        urls = []
        for business in self.list_sitemap_businesses(db):
            slugs = business_slugs(business)
            localized = {
                locale.value: business_url(self.site_url, locale, slugs[locale]) for locale in LOCALES
            }
            priority = "0.9" if business.verified else "0.7"
            for locale in LOCALES:
                urls.append(SitemapUrl(
                    loc=localized[locale.value],
                    lastmod=self.format_date(business.updated_at),
                    changefreq="weekly",
                    priority=priority,
                    alternates=localized,
                ))

        logger.info(f"Generated {len(urls)} business URLs for sitemap")
        return urls

    def generate_sitemap_xml(self, urls: List[SitemapUrl]) -> str:
        """Generate XML sitemap from URL list."""
        xml_content = ['<?xml version="1.0" encoding="UTF-8"?>']

        if any(url.alternates for url in urls):
            xml_content.append(
                '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" '
                'xmlns:xhtml="http://www.w3.org/1999/xhtml">'
            )
        else:
            xml_content.append('<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">')

        for url in urls:
            xml_content.append('  <url>')
            xml_content.append(f'    <loc>{self.escape_xml(url.loc)}</loc>')

            if url.lastmod:
                xml_content.append(f'    <lastmod>{url.lastmod}</lastmod>')
            if url.changefreq:
                xml_content.append(f'    <changefreq>{url.changefreq}</changefreq>')
            if url.priority:
                xml_content.append(f'    <priority>{url.priority}</priority>')

            for hreflang, href in url.alternates.items():
                xml_content.append(
                    f'    <xhtml:link rel="alternate" hreflang="{hreflang}" href="{self.escape_xml(href)}"/>'
                )

            xml_content.append('  </url>')

        xml_content.append('</urlset>')
        return '\n'.join(xml_content)

    def generate_sitemap_index_xml(self, sitemaps: List[Dict[str, str]]) -> str:
        """Generate sitemap index XML."""
        current_date = self.format_date(None)

        xml_content = ['<?xml version="1.0" encoding="UTF-8"?>']
        xml_content.append('<sitemapindex xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">')

        for sitemap in sitemaps:
            xml_content.append('  <sitemap>')
            xml_content.append(f'    <loc>{self.escape_xml(sitemap["loc"])}</loc>')
            xml_content.append(f'    <lastmod>{sitemap.get("lastmod", current_date)}</lastmod>')
            xml_content.append('  </sitemap>')

        xml_content.append('</sitemapindex>')
        return '\n'.join(xml_content)

    def get_sitemap_list(self) -> List[Dict[str, str]]:
        """Get list of available sitemaps for the index."""
        current_date = self.format_date(None)
        return [
            {"loc": f"{self.site_url}/sitemap-static.xml", "lastmod": current_date},
            {"loc": f"{self.site_url}/sitemap-businesses.xml", "lastmod": current_date},
        ]
