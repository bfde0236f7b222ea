from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from app.core.auth import get_app_settings
from app.core.config import Settings
from app.routers.deps import get_seo_service
from app.schemas.seo import PageSeo
from app.services.sitemap_service import (
    build_sitemap_xml,
    render_robots,
    render_sitemap_entries,
    robots,
    sitemap_entries,
)
from app.services.seo_service import SeoService

router = APIRouter(tags=["SEO"])

XML_HEADERS = {"Cache-Control": "public, max-age=3600"}


@router.get("/api/sitemap")
def api_sitemap(settings: Settings = Depends(get_app_settings)):
    """Full sitemap including every state x service combination."""
    xml = build_sitemap_xml(settings.APP_URL)
    return Response(content=xml, media_type="application/xml", headers=XML_HEADERS)


@router.get("/sitemap.xml")
def sitemap_xml(settings: Settings = Depends(get_app_settings)):
    """Static pages, service categories and states."""
    xml = render_sitemap_entries(sitemap_entries(settings.APP_URL))
    return Response(content=xml, media_type="application/xml", headers=XML_HEADERS)


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots_txt(settings: Settings = Depends(get_app_settings)):
    return render_robots(robots(settings.APP_URL))


@router.get("/api/seo/home", response_model=PageSeo)
def home_seo(service: SeoService = Depends(get_seo_service)):
    """Homepage metadata plus Organization / WebSite / Service JSON-LD."""
    return service.home_page()


@router.get("/api/seo/marketplace", response_model=PageSeo)
def marketplace_seo(
    service_type: str | None = Query(default=None, alias="service"),
    state: str | None = None,
    service: SeoService = Depends(get_seo_service),
):
    return service.marketplace_page(service_type, state)


@router.get("/api/providers/{provider_id}/seo", response_model=PageSeo)
def provider_seo(
    provider_id: str,
    service: SeoService = Depends(get_seo_service),
):
    """Provider page metadata plus LocalBusiness and breadcrumb JSON-LD."""
    return service.provider_page(provider_id)
