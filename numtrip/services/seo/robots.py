"""robots.txt body."""
from numtrip.config import get_settings

PUBLIC_PATHS = (
    "/",
    "/es/",
    "/en/",
    "/*/business/",
    "/*/search",
    "/*/contact",
    "/*/cookie-preferences",
)

PRIVATE_PATHS = ("/admin/", "/dashboard/", "/auth/", "/api/", "/_next/")

# bot -> crawl delay in seconds
CRAWL_DELAYS = (
    ("Bingbot", 0),
    ("Slurp", 0),
    ("AhrefsBot", 10),
    ("SemrushBot", 10),
)


def build_robots_txt(site_url: str = None) -> str:
    site_url = (site_url or get_settings().site_url).rstrip("/")
    allow = [f"Allow: {path}" for path in PUBLIC_PATHS]
    disallow = [f"Disallow: {path}" for path in PRIVATE_PATHS]

    lines = ["# Googlebot specific rules", "User-agent: Googlebot", *allow, *disallow, "Crawl-delay: 0", ""]
    lines += ["# All other bots", "User-agent: *", *allow, "", "# Block admin and private areas", *disallow,
              "Disallow: /favicon.ico", ""]
    lines += ["# Sitemaps", f"Sitemap: {site_url}/sitemap.xml", f"Sitemap: {site_url}/sitemap-index.xml", ""]
    for bot, delay in CRAWL_DELAYS:
        lines += [f"User-agent: {bot}", f"Crawl-delay: {delay}", ""]
    return "\n".join(lines).rstrip("\n") + "\n"
