"""
Page metadata and schema.org JSON-LD for the public pages.

The frontend renders these into <head>; everything here is plain data
built from the site's base URL and, for provider pages, the provider row.
"""

import logging
from typing import Any, Iterable, Mapping
from urllib.parse import quote, urlencode

from fastapi import HTTPException, status

from app.repositories.provider_repo import ProviderRepository
from app.schemas.provider import ProviderRead
from app.schemas.seo import PageSeo

logger = logging.getLogger(__name__)

SITE_NAME = "Nimart"
SCHEMA_CONTEXT = "https://schema.org"
DEFAULT_IMAGE = "/og-image.png"
SUPPORT_PHONE = "+2348038887589"
SUPPORT_EMAIL = "info@nimart.ng"

SOCIAL_PROFILES = [
    "https://facebook.com/nimart",
    "https://instagram.com/nimart",
    "https://twitter.com/nimartng",
    "https://youtube.com/@nimart",
]

DEFAULT_SERVICE_TYPES = [
    "Mechanics", "Electricians", "Plumbers", "Carpenters", "Painters",
    "Tailors", "Cleaners", "Chefs",
]

# Geographic centre of Nigeria, used when a provider has no coordinates
NIGERIA_CENTER = (9.081999, 8.675277)


def absolute_url(base_url: str, url: str) -> str:
    return url if url.startswith("http") else f"{base_url.rstrip('/')}{url}"


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def seo_metadata(
    base_url: str,
    title: str,
    description: str,
    keywords: Iterable[str] = (),
    url: str | None = None,
    image: str = DEFAULT_IMAGE,
    page_type: str = "website",
    author: str | None = None,
    published_time: str | None = None,
    modified_time: str | None = None,
) -> dict[str, Any]:
    """
    Title, description, Open Graph, Twitter card, robots and canonical
    URL for one page. Titles get a "| Nimart" suffix unless they already
    name the site.
    """
    full_title = title if SITE_NAME in title else f"{title} | {SITE_NAME}"
    full_url = absolute_url(base_url, url or base_url)
    full_image = absolute_url(base_url, image)

    open_graph: dict[str, Any] = {
        "title": full_title,
        "description": description,
        "url": full_url,
        "siteName": SITE_NAME,
        "images": [
            {"url": full_image, "width": 1200, "height": 630, "alt": full_title}
        ],
        "type": page_type,
        "locale": "en_NG",
    }
    if author:
        open_graph["authors"] = [author]
    if published_time:
        open_graph["publishedTime"] = published_time
    if modified_time:
        open_graph["modifiedTime"] = modified_time

    return {
        "title": full_title,
        "description": description,
        "keywords": ", ".join(keywords),
        "openGraph": open_graph,
        "twitter": {
            "card": "summary_large_image",
            "title": full_title,
            "description": description,
            "images": [full_image],
            "site": "@nimartng",
            "creator": "@nimartng",
        },
        "robots": {
            "index": True,
            "follow": True,
            "googleBot": {
                "index": True,
                "follow": True,
                "max-video-preview": -1,
                "max-image-preview": "large",
                "max-snippet": -1,
            },
        },
        "alternates": {"canonical": full_url},
    }


def homepage_seo(base_url: str) -> dict[str, Any]:
    return seo_metadata(
        base_url,
        title="Nimart - Nigeria's #1 Service Marketplace | Find Verified Professionals",
        description=(
            "Find trusted and verified service providers in Nigeria. Connect with "
            "mechanics, electricians, plumbers, carpenters, painters, tailors, "
            "cleaners, chefs, and 50+ other services."
        ),
        keywords=[
            "Nimart", "service providers Nigeria", "mechanics near me",
            "electricians near me", "plumbers near me", "carpenters near me",
            "painters near me", "tailors near me", "cleaners near me",
            "chefs near me", "service marketplace", "Nigeria services",
            "verified professionals", "home services", "professional services",
        ],
        url=base_url,
    )


def provider_seo(base_url: str, provider: ProviderRead) -> dict[str, Any]:
    location = provider.state_name or "Nigeria"
    if provider.bio:
        description = provider.bio
    else:
        experience = (
            f"{provider.years_experience} years experience"
            if provider.years_experience
            else "Professional"
        )
        parts = [f"{experience} {provider.service_type} in {location}."]
        if provider.is_verified:
            parts.append("Verified and trusted professional.")
        parts.append("Book now on Nimart.")
        description = " ".join(parts)

    return seo_metadata(
        base_url,
        title=f"{provider.business_name} | {provider.service_type} in {location} | Nimart",
        description=description,
        keywords=[
            provider.business_name,
            provider.service_type,
            f"{provider.service_type} in {location}",
            "service provider",
            "Nigeria",
            location,
            "nimart",
            "professional services",
            provider.service_type.lower(),
        ],
        url=f"/providers/{provider.id}",
        image=provider.profile_picture_url or "/default-provider.png",
        page_type="profile",
    )


def marketplace_seo(
    base_url: str,
    service: str | None = None,
    state: str | None = None,
) -> dict[str, Any]:
    """Metadata for /marketplace, optionally narrowed to a service and/or state."""
    title = "Service Marketplace | Find Professionals | Nimart"
    description = (
        "Browse and find verified service providers in Nigeria. "
        "All categories available."
    )
    service_name = _capitalize(service) if service else None
    state_name = _capitalize(state) if state else None

    if service_name:
        title = f"{service_name}s in Nigeria | Find {service_name}s | Nimart"
        description = (
            f"Find and hire verified {service_name.lower()}s in Nigeria. "
            "Compare ratings, prices, and availability."
        )
    if state_name:
        if service_name:
            title = f"{service_name}s in {state_name} | Local {service_name}s | Nimart"
            description = (
                f"Find and hire verified {service_name.lower()}s in {state_name}. "
                "Local professionals near you."
            )
        else:
            title = f"Service Providers in {state_name} | Nimart"
            description = (
                f"Find verified service providers in {state_name}, Nigeria. "
                "All service categories available."
            )

    if service:
        keywords = [f"{service}s in Nigeria", f"{service} services", f"{service} near me"]
    else:
        keywords = ["service marketplace", "find professionals", "hire services Nigeria"]
    if state:
        keywords += [f"{state} service providers", f"services in {state}"]
    keywords += ["Nimart", "service providers", "verified professionals"]

    filters = {k: v for k, v in (("service", service), ("state", state)) if v}
    url = f"/marketplace?{urlencode(filters)}" if filters else "/marketplace"

    return seo_metadata(
        base_url,
        title=title,
        description=description,
        keywords=keywords,
        url=url,
        image="/og-marketplace.png",
    )


def service_category_seo(
    base_url: str,
    name: str,
    description: str | None = None,
) -> dict[str, Any]:
    return seo_metadata(
        base_url,
        title=f"{name} Services in Nigeria | Find {name}s | Nimart",
        description=description
        or (
            f"Find and hire verified {name.lower()}s in Nigeria. "
            f"Professional {name.lower()} services near you."
        ),
        keywords=[
            f"{name} services",
            f"{name.lower()} near me",
            f"{name} in Nigeria",
            f"hire {name.lower()}",
            f"{name} professionals",
            "Nimart",
        ],
        url=f"/marketplace?service={quote(name.lower(), safe='')}",
        image="/og-category.png",
    )


def _base_schema(base_url: str, schema_type: str) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
        "name": SITE_NAME,
        "description": (
            "Nigeria's premier service marketplace connecting customers "
            "with trusted professionals"
        ),
        "url": base_url,
        "logo": absolute_url(base_url, "/logo.png"),
        "sameAs": SOCIAL_PROFILES,
    }


def organization_schema(base_url: str) -> dict[str, Any]:
    return {
        **_base_schema(base_url, "Organization"),
        "foundingDate": "2024",
        "foundingLocation": "Nigeria",
        "address": {"@type": "PostalAddress", "addressCountry": "NG"},
        "contactPoint": {
            "@type": "ContactPoint",
            "contactType": "customer service",
            "email": SUPPORT_EMAIL,
            "telephone": SUPPORT_PHONE,
        },
    }


def website_schema(base_url: str) -> dict[str, Any]:
    return {
        **_base_schema(base_url, "WebSite"),
        "potentialAction": {
            "@type": "SearchAction",
            "target": absolute_url(base_url, "/marketplace?search={search_term_string}"),
            "query-input": "required name=search_term_string",
        },
    }


def service_schema(
    base_url: str,
    service_types: list[str] | None = None,
) -> dict[str, Any]:
    return {
        **_base_schema(base_url, "Service"),
        "serviceType": service_types or DEFAULT_SERVICE_TYPES,
        "areaServed": {"@type": "Country", "name": "Nigeria"},
        "offers": {"@type": "Offer", "priceCurrency": "NGN"},
    }


def local_business_schema(base_url: str, provider: ProviderRead) -> dict[str, Any]:
    """LocalBusiness entry for a provider page."""
    latitude, longitude = NIGERIA_CENTER
    return {
        **_base_schema(base_url, "LocalBusiness"),
        "name": provider.business_name,
        "image": provider.profile_picture_url or absolute_url(base_url, "/logo.png"),
        "telephone": SUPPORT_PHONE,
        "address": {
            "@type": "PostalAddress",
            "addressLocality": provider.state_name or "Nigeria",
            "addressRegion": provider.state_name or "NG",
            "addressCountry": "NG",
        },
        "geo": {"@type": "GeoCoordinates", "latitude": latitude, "longitude": longitude},
        "openingHours": "Mo-Su 08:00-20:00",
        "priceRange": "₦₦",
    }


def breadcrumb_schema(
    base_url: str,
    items: Iterable[tuple[str, str]],
) -> dict[str, Any]:
    """BreadcrumbList from (name, url) pairs, positions starting at 1."""
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": index,
                "name": name,
                "item": absolute_url(base_url, url),
            }
            for index, (name, url) in enumerate(items, start=1)
        ],
    }


def faq_schema(questions: Iterable[Mapping[str, str]]) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": q["question"],
                "acceptedAnswer": {"@type": "Answer", "text": q["answer"]},
            }
            for q in questions
        ],
    }


class SeoService:
    """
    Page metadata + structured data for public pages.

    Only provider pages touch the database; the rest is static.
    """

    def __init__(self, providers: ProviderRepository, base_url: str):
        self.providers = providers
        self.base_url = base_url.rstrip("/")

    def home_page(self) -> PageSeo:
        return PageSeo(
            meta=homepage_seo(self.base_url),
            structured_data=[
                organization_schema(self.base_url),
                website_schema(self.base_url),
                service_schema(self.base_url),
            ],
        )

    def marketplace_page(self, service: str | None, state: str | None) -> PageSeo:
        crumbs = [("Home", "/"), ("Marketplace", "/marketplace")]
        return PageSeo(
            meta=marketplace_seo(self.base_url, service, state),
            structured_data=[breadcrumb_schema(self.base_url, crumbs)],
        )

    def provider_page(self, provider_id: str) -> PageSeo:
        """
        Raises:
            HTTPException(404): provider not found.
            HTTPException(500): lookup failed.
        """
        try:
            provider = self.providers.get(provider_id)
        except Exception as e:
            logger.error("Error loading provider %s for SEO: %s", provider_id, e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )
        if provider is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Provider not found",
            )

        crumbs = [
            ("Home", "/"),
            ("Marketplace", "/marketplace"),
            (provider.business_name, f"/providers/{provider.id}"),
        ]
        return PageSeo(
            meta=provider_seo(self.base_url, provider),
            structured_data=[
                local_business_schema(self.base_url, provider),
                breadcrumb_schema(self.base_url, crumbs),
            ],
        )
