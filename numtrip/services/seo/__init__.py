"""SEO helpers: slugs, landmark filtering, robots.txt and JSON-LD."""
from numtrip.services.seo.slugs import (
    ParsedSlug,
    business_slugs,
    generate_business_slug,
    parse_business_slug,
    slugify,
)
from numtrip.services.seo.landmarks import (
    EXCLUDED_LANDMARK_KEYWORDS,
    filter_contactable,
    is_contactable,
    is_landmark,
)
from numtrip.services.seo.robots import build_robots_txt
from numtrip.services.seo.structured_data import (
    business_schema,
    organization_schema,
    website_schema,
)

__all__ = [
    "ParsedSlug",
    "business_slugs",
    "generate_business_slug",
    "parse_business_slug",
    "slugify",
    "EXCLUDED_LANDMARK_KEYWORDS",
    "filter_contactable",
    "is_contactable",
    "is_landmark",
    "build_robots_txt",
    "business_schema",
    "organization_schema",
    "website_schema",
]
