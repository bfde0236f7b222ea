from datetime import datetime, timezone

from app.schemas.provider import NamedRef, ProviderRead
from app.services.seo_service import (
    breadcrumb_schema,
    faq_schema,
    marketplace_seo,
    provider_seo,
    seo_metadata,
    service_category_seo,
)

BASE = "https://nimart.ng"


def _provider(**kw):
    values = dict(
        id="p1",
        business_name="Ade Plumbing",
        service_type="Plumber",
        states=[NamedRef(name="Lagos")],
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )
    values.update(kw)
    return ProviderRead(**values)


def test_title_gets_site_suffix_once():
    assert seo_metadata(BASE, "About", "d")["title"] == "About | Nimart"
    assert seo_metadata(BASE, "Nimart Help", "d")["title"] == "Nimart Help"


def test_metadata_makes_urls_absolute():
    meta = seo_metadata(BASE, "About", "d", keywords=["a", "b"], url="/about")
    assert meta["alternates"]["canonical"] == "https://nimart.ng/about"
    assert meta["openGraph"]["images"][0]["url"] == "https://nimart.ng/og-image.png"
    assert meta["openGraph"]["locale"] == "en_NG"
    assert meta["keywords"] == "a, b"
    assert "authors" not in meta["openGraph"]


def test_provider_seo_builds_description_from_profile():
    meta = provider_seo(BASE, _provider(years_experience=6, is_verified=True))
    assert meta["title"] == "Ade Plumbing | Plumber in Lagos | Nimart"
    assert meta["description"] == (
        "6 years experience Plumber in Lagos. "
        "Verified and trusted professional. Book now on Nimart."
    )
    assert meta["openGraph"]["type"] == "profile"
    assert meta["openGraph"]["images"][0]["url"] == "https://nimart.ng/default-provider.png"


def test_provider_seo_prefers_bio_and_falls_back_to_nigeria():
    meta = provider_seo(BASE, _provider(states=None, bio="Leak fixes, same day."))
    assert meta["description"] == "Leak fixes, same day."
    assert "in Nigeria" in meta["title"]


def test_marketplace_seo_variants():
    assert marketplace_seo(BASE)["alternates"]["canonical"] == "https://nimart.ng/marketplace"

    both = marketplace_seo(BASE, service="plumber", state="lagos")
    assert both["title"] == "Plumbers in Lagos | Local Plumbers | Nimart"
    assert both["alternates"]["canonical"] == (
        "https://nimart.ng/marketplace?service=plumber&state=lagos"
    )

    state_only = marketplace_seo(BASE, state="kano")
    assert state_only["title"] == "Service Providers in Kano | Nimart"


def test_service_category_seo_encodes_name():
    meta = service_category_seo(BASE, "IT Support")
    assert meta["alternates"]["canonical"] == "https://nimart.ng/marketplace?service=it%20support"


def test_breadcrumb_and_faq_schemas():
    crumbs = breadcrumb_schema(BASE, [("Home", "/"), ("Docs", "https://docs.nimart.ng")])
    assert [i["position"] for i in crumbs["itemListElement"]] == [1, 2]
    assert crumbs["itemListElement"][0]["item"] == "https://nimart.ng/"
    assert crumbs["itemListElement"][1]["item"] == "https://docs.nimart.ng"

    faq = faq_schema([{"question": "Is it free?", "answer": "Yes."}])
    assert faq["@type"] == "FAQPage"
    assert faq["mainEntity"][0]["acceptedAnswer"]["text"] == "Yes."


def test_provider_seo_endpoint(client, supabase):
    supabase.tables["providers"] = [
        {"id": "p1", "business_name": "Ade Plumbing", "service_type": "Plumber",
         "created_at": "2025-01-01T00:00:00+00:00", "states": {"name": "Lagos"}}
    ]
    resp = client.get("/api/providers/p1/seo", follow_redirects=False)
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["title"] == "Ade Plumbing | Plumber in Lagos | Nimart"
    business, crumbs = body["structured_data"]
    assert business["@type"] == "LocalBusiness"
    assert business["address"]["addressLocality"] == "Lagos"
    assert crumbs["itemListElement"][-1]["item"] == "https://nimart.ng/providers/p1"


def test_provider_seo_unknown_provider_is_404(client):
    resp = client.get("/api/providers/nope/seo")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Provider not found"}


def test_site_and_marketplace_seo_are_public(client):
    home = client.get("/api/seo/home", follow_redirects=False)
    assert home.status_code == 200
    types = [d["@type"] for d in home.json()["structured_data"]]
    assert types == ["Organization", "WebSite", "Service"]

    market = client.get("/api/seo/marketplace", params={"service": "chef"}, follow_redirects=False)
    assert market.status_code == 200
    assert market.json()["meta"]["title"] == "Chefs in Nigeria | Find Chefs | Nimart"
