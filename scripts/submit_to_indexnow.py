#!/usr/bin/env python3
"""Bulk-submit every public NumTrip URL to IndexNow.

Collects the static pages and both locale URLs of every contactable,
non-landmark business (the same set the sitemap lists) and submits them
in batches of INDEXNOW_BATCH_SIZE.

Usage:
    python scripts/submit_to_indexnow.py [--dry-run]
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from numtrip.config import get_settings
from numtrip.core.dependencies import get_indexnow_service
from numtrip.core.logging_setup import configure_logging
from numtrip.infrastructure.external_apis.http_client import close_shared_client
from numtrip.infrastructure.persistence.db import SessionLocal
from numtrip.services.sitemap_generator import SitemapGenerator

logger = logging.getLogger(__name__)


def collect_urls(generator: SitemapGenerator) -> list:
    session = SessionLocal()
    try:
        urls = [url.loc for url in generator.generate_static_urls()]
        urls.extend(url.loc for url in generator.generate_business_urls(session))
        return urls
    finally:
        session.close()


async def main(dry_run: bool = False) -> int:
    settings = get_settings()
    service = get_indexnow_service(settings)
    if not service.configured:
        logger.error("INDEXNOW_KEY is not set; nothing submitted")
        return 1

    urls = collect_urls(SitemapGenerator(settings.site_url))
    logger.info(f"Collected {len(urls)} URLs for {service.site_host}")

    if dry_run:
        for url in urls:
            print(url)
        return 0

    try:
        batches = (len(urls) + service.batch_size - 1) // service.batch_size
        succeeded = await service.submit_in_batches(urls)
    finally:
        await close_shared_client()

    logger.info(f"Submitted {succeeded}/{batches} batches successfully")
    return 0 if succeeded == batches else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Submit NumTrip URLs to IndexNow")
    parser.add_argument("--dry-run", action="store_true", help="Print the URLs without submitting")
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(main(dry_run=args.dry_run)))
