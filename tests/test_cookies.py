from email.utils import parsedate_to_datetime

from starlette.responses import Response

from app.core.cookies import (
    AuthCookieSet,
    CookieJar,
    clear_auth_cookies,
    parse_set_cookie,
    read_auth_cookies,
    write_auth_cookies,
)
from app.models.session import UserType


def _set_cookie_headers(response: Response) -> list[str]:
    return [v.decode() for k, v in response.raw_headers if k == b"set-cookie"]


def test_write_authenticated_provider_sets_three_cookies():
    jar = CookieJar()
    write_auth_cookies(
        jar,
        AuthCookieSet(is_authenticated=True, user_type=UserType.PROVIDER, provider_id="p-9"),
    )
    assert jar.values == {
        "is-authenticated": "true",
        "user-type": "provider",
        "provider-id": "p-9",
    }
    assert all(w.max_age == 60 * 60 * 24 * 7 for w in jar.writes)


def test_write_without_provider_id_leaves_it_untouched():
    jar = CookieJar()
    jar.set("provider-id", "old")
    write_auth_cookies(jar, AuthCookieSet(is_authenticated=True, user_type=UserType.PROVIDER))
    assert jar.get("provider-id") == "old"
    assert [w.name for w in jar.writes] == ["provider-id", "is-authenticated", "user-type"]


def test_unauthenticated_set_clears_all_auth_cookies():
    jar = CookieJar()
    jar.set("is-authenticated", "true")
    write_auth_cookies(jar, AuthCookieSet())
    assert "is-authenticated" not in jar
    cleared = [w.name for w in jar.writes if w.is_clear]
    assert cleared == ["is-authenticated", "user-type", "provider-id"]


def test_clear_with_tokens_includes_supabase_cookies():
    jar = CookieJar()
    clear_auth_cookies(jar, include_tokens=True)
    names = {w.name for w in jar.writes}
    assert {"sb-access-token", "sb-refresh-token"} <= names


def test_apply_emits_expired_headers_for_cleared_cookies():
    jar = CookieJar()
    clear_auth_cookies(jar)
    response = jar.apply(Response())

    headers = _set_cookie_headers(response)
    assert len(headers) == 3
    for header in headers:
        name, value, attrs = parse_set_cookie(header)
        assert value == ""
        assert attrs["path"] == "/"
        assert parsedate_to_datetime(attrs["expires"]).year == 1970


def test_read_auth_cookies_defaults():
    parsed = read_auth_cookies({})
    assert parsed.is_authenticated is False
    assert parsed.user_type is UserType.CUSTOMER
    assert parsed.provider_id is None

    parsed = read_auth_cookies({"is-authenticated": "TRUE", "user-type": "provider"})
    assert parsed.is_authenticated is False
    assert parsed.user_type is UserType.PROVIDER
