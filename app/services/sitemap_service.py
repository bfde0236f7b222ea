"""
Sitemap and robots.txt generation.

Two independent sitemap generators exist and they enumerate different
service lists: `build_sitemap_xml` (8 service types, state x service
combinations) and `sitemap_entries` (28 categories, no combinations).
Which list is authoritative has not been settled, so they stay apart.
"""

import logging
from datetime import date, datetime, timezone
from typing import NamedTuple
from urllib.parse import quote
from xml.sax.saxutils import escape

from app.models.location import NIGERIAN_STATES
from app.schemas.seo import ChangeFrequency, Robots, RobotsRule, SitemapEntry

logger = logging.getLogger(__name__)

SITEMAP_URL_LIMIT = 5000

SERVICE_TYPES: tuple[str, ...] = (
    "Mechanic", "Electrician", "Plumber", "Carpenter", "Painter",
    "Tailor", "Cleaner", "Chef",
)

SERVICE_CATEGORIES: tuple[str, ...] = (
    "Mechanics", "Electricians", "Plumbers", "Carpenters", "Painters",
    "Tailors", "Cleaners", "Chefs", "Drivers", "Gardeners", "Security",
    "Makeup Artists", "Photographers", "Videographers", "Tutors",
    "IT Support", "Web Developers", "Graphic Designers", "Accountants",
    "Lawyers", "Doctors", "Nurses", "Fitness Trainers", "Caterers",
    "Event Planners", "Interior Designers", "Architects", "Builders",
)


class StaticPage(NamedTuple):
    path: str
    priority: float
    change_frequency: ChangeFrequency


XML_STATIC_PAGES: tuple[StaticPage, ...] = (
    StaticPage("", 1.0, "daily"),
    StaticPage("/marketplace", 0.9, "hourly"),
    StaticPage("/login", 0.5, "monthly"),
    StaticPage("/register", 0.5, "monthly"),
    StaticPage("/provider/register", 0.8, "monthly"),
    StaticPage("/about", 0.7, "monthly"),
    StaticPage("/contact", 0.7, "monthly"),
    StaticPage("/forgot-password", 0.3, "yearly"),
    StaticPage("/reset-password", 0.3, "yearly"),
    StaticPage("/verify", 0.3, "yearly"),
)

STATIC_PAGES: tuple[StaticPage, ...] = (
    StaticPage("", 1.0, "daily"),
    StaticPage("/marketplace", 0.9, "hourly"),
    StaticPage("/login", 0.5, "monthly"),
    StaticPage("/register", 0.5, "monthly"),
    StaticPage("/provider/register", 0.8, "weekly"),
    StaticPage("/about", 0.7, "monthly"),
    StaticPage("/contact", 0.7, "monthly"),
    StaticPage("/forgot-password", 0.3, "yearly"),
    StaticPage("/privacy", 0.3, "yearly"),
    StaticPage("/terms", 0.3, "yearly"),
)


def slugify(name: str) -> str:
    """"Akwa Ibom" -> "akwa-ibom"."""
    return "-".join(name.lower().split())


def marketplace_url(base_url: str, **params: str) -> str:
    query = "&".join(f"{k}={quote(v, safe='')}" for k, v in params.items())
    return f"{base_url}/marketplace?{query}"


def today() -> date:
    return datetime.now(timezone.utc).date()


def _url_element(loc: str, lastmod: date, changefreq: str, priority: float) -> str:
    return (
        "\n  <url>"
        f"\n    <loc>{escape(loc)}</loc>"
        f"\n    <lastmod>{lastmod.isoformat()}</lastmod>"
        f"\n    <changefreq>{changefreq}</changefreq>"
        f"\n    <priority>{priority:.1f}</priority>"
        "\n  </url>"
    )


def build_sitemap_xml(
    base_url: str,
    lastmod: date | None = None,
    states: tuple[str, ...] = NIGERIAN_STATES,
    services: tuple[str, ...] = SERVICE_TYPES,
    static_pages: tuple[StaticPage, ...] = XML_STATIC_PAGES,
) -> str:
    """
    Hand-built urlset: static pages, then for every state its own
    marketplace page followed by one page per service type.

    Produces len(static_pages) + len(states) * (1 + len(services)) URLs.
    """
    base_url = base_url.rstrip("/")
    lastmod = lastmod or today()

    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
    ]
    for page in static_pages:
        parts.append(
            _url_element(
                base_url + page.path, lastmod, page.change_frequency, page.priority
            )
        )

    for state in states:
        state_slug = slugify(state)
        parts.append(
            _url_element(
                marketplace_url(base_url, state=state_slug), lastmod, "daily", 0.7
            )
        )
        for service in services:
            loc = marketplace_url(base_url, service=slugify(service), state=state_slug)
            parts.append(_url_element(loc, lastmod, "daily", 0.7))

    parts.append("\n</urlset>")
    xml = "".join(parts)
    logger.info("Generated sitemap with %d URLs", xml.count("<loc>"))
    return xml


def sitemap_entries(
    base_url: str,
    lastmod: date | None = None,
) -> list[SitemapEntry]:
    """
    Typed sitemap: static pages, one page per service category, one page
    per state. Capped at SITEMAP_URL_LIMIT entries.
    """
    base_url = base_url.rstrip("/")
    lastmod = lastmod or today()

    entries = [
        SitemapEntry(
            url=base_url + page.path,
            last_modified=lastmod,
            change_frequency=page.change_frequency,
            priority=page.priority,
        )
        for page in STATIC_PAGES
    ]
    entries += [
        SitemapEntry(
            url=marketplace_url(base_url, service=slugify(category)),
            last_modified=lastmod,
            change_frequency="daily",
            priority=0.8,
        )
        for category in SERVICE_CATEGORIES
    ]
    entries += [
        SitemapEntry(
            url=marketplace_url(base_url, state=slugify(state)),
            last_modified=lastmod,
            change_frequency="daily",
            priority=0.7,
        )
        for state in NIGERIAN_STATES
    ]
    return entries[:SITEMAP_URL_LIMIT]


def render_sitemap_entries(entries: list[SitemapEntry]) -> str:
    body = "".join(
        _url_element(e.url, e.last_modified, e.change_frequency, e.priority)
        for e in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        f"{body}\n</urlset>"
    )


def robots(base_url: str) -> Robots:
    return Robots(
        rules=[
            RobotsRule(
                user_agent="*",
                allow=["/"],
                disallow=[
                    "/api/",
                    "/admin/",
                    "/_next/",
                    "/auth/callback",
                    "/test-simple",
                ],
            ),
            RobotsRule(
                user_agent="Googlebot",
                allow=["/"],
                disallow=["/api/", "/admin/", "/auth/callback"],
            ),
        ],
        sitemap=f"{base_url.rstrip('/')}/sitemap.xml",
    )


def render_robots(config: Robots) -> str:
    lines: list[str] = []
    for rule in config.rules:
        lines.append(f"User-Agent: {rule.user_agent}")
        lines.extend(f"Allow: {path}" for path in rule.allow)
        lines.extend(f"Disallow: {path}" for path in rule.disallow)
        lines.append("")
    lines.append(f"Sitemap: {config.sitemap}")
    return "\n".join(lines) + "\n"
