from datetime import date
from typing import Any, Literal

from sqlmodel import SQLModel

ChangeFrequency = Literal[
    "always", "hourly", "daily", "weekly", "monthly", "yearly", "never"
]


class SitemapEntry(SQLModel):
    """One `<url>` element of a sitemap."""

    url: str
    last_modified: date
    change_frequency: ChangeFrequency
    priority: float


class RobotsRule(SQLModel):
    user_agent: str
    allow: list[str]
    disallow: list[str]


class Robots(SQLModel):
    rules: list[RobotsRule]
    sitemap: str


class PageSeo(SQLModel):
    """
    Everything a page puts in <head>: `meta` (title, Open Graph,
    Twitter, robots, canonical) and schema.org JSON-LD objects.
    """

    meta: dict[str, Any]
    structured_data: list[dict[str, Any]]
