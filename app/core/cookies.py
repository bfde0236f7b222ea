"""
Auth cookie codec.

The route guard has no access to Supabase; it only sees these cookies:

    is-authenticated  "true" while a Supabase session exists
    user-type         "customer" | "provider"
    provider-id       providers.id of the signed-in provider (optional)

Writes are recorded on a `CookieJar` and copied onto the outgoing
response with `CookieJar.apply(response)`, so the same derivation code
can run inside a request or against a standalone jar.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.cookies import SimpleCookie
from typing import Mapping

from starlette.responses import Response

from app.models.session import UserType

logger = logging.getLogger(__name__)

IS_AUTHENTICATED = "is-authenticated"
USER_TYPE = "user-type"
PROVIDER_ID = "provider-id"

AUTH_COOKIES: tuple[str, ...] = (IS_AUTHENTICATED, USER_TYPE, PROVIDER_ID)

# Supabase token cookies (plus the legacy token name) cleared on logout
TOKEN_COOKIES: tuple[str, ...] = (
    "sb-access-token",
    "sb-refresh-token",
    "nimart-auth-token",
)

COOKIE_MAX_AGE = 60 * 60 * 24 * 7  # 7 days
COOKIE_PATH = "/"
COOKIE_SAMESITE = "lax"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class AuthCookieSet:
    """Cookie values derived from one Supabase session."""

    is_authenticated: bool = False
    user_type: UserType | None = None
    provider_id: str | None = None


@dataclass(frozen=True)
class CookieWrite:
    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None

    @property
    def is_clear(self) -> bool:
        return self.expires is not None and self.expires <= EPOCH


@dataclass
class CookieJar:
    """
    Ordered record of cookie writes plus the resulting cookie state.

    `values` mirrors what a browser would hold after all writes.
    """

    secure: bool = False
    writes: list[CookieWrite] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)

    def set(self, name: str, value: str, max_age: int = COOKIE_MAX_AGE) -> None:
        self.writes.append(CookieWrite(name=name, value=value, max_age=max_age))
        self.values[name] = value

    def clear(self, name: str) -> None:
        """Overwrite with an empty value that expired at the epoch."""
        self.writes.append(CookieWrite(name=name, value="", max_age=0, expires=EPOCH))
        self.values.pop(name, None)

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def apply(self, response: Response) -> Response:
        """Emit one Set-Cookie header per recorded write, in order."""
        for w in self.writes:
            response.set_cookie(
                key=w.name,
                value=w.value,
                max_age=w.max_age,
                expires=w.expires,
                path=COOKIE_PATH,
                secure=self.secure,
                samesite=COOKIE_SAMESITE,
            )
        return response


def write_auth_cookies(jar: CookieJar, cookie_set: AuthCookieSet) -> None:
    """
    Write a derived cookie set.

    An unauthenticated set clears all three auth cookies. A missing
    provider id leaves any existing `provider-id` cookie untouched.
    """
    if not cookie_set.is_authenticated:
        clear_auth_cookies(jar)
        return

    user_type = cookie_set.user_type or UserType.CUSTOMER
    jar.set(IS_AUTHENTICATED, "true")
    jar.set(USER_TYPE, user_type.value)
    if cookie_set.provider_id:
        jar.set(PROVIDER_ID, cookie_set.provider_id)


def clear_auth_cookies(jar: CookieJar, include_tokens: bool = False) -> None:
    names = AUTH_COOKIES + (TOKEN_COOKIES if include_tokens else ())
    for name in names:
        jar.clear(name)
        logger.debug("Cleared cookie: %s", name)


def read_auth_cookies(cookies: Mapping[str, str]) -> AuthCookieSet:
    """
    Decode request cookies.

    `is-authenticated` counts only when it is exactly "true"; an absent or
    unknown `user-type` reads as customer.
    """
    is_authenticated = cookies.get(IS_AUTHENTICATED) == "true"
    raw_type = (cookies.get(USER_TYPE) or "").strip().lower()
    try:
        user_type = UserType(raw_type)
    except ValueError:
        user_type = UserType.CUSTOMER
    return AuthCookieSet(
        is_authenticated=is_authenticated,
        user_type=user_type,
        provider_id=cookies.get(PROVIDER_ID) or None,
    )


def parse_set_cookie(header: str) -> tuple[str, str, dict[str, str]]:
    """
    Split one Set-Cookie header into (name, value, attributes).

    Attribute names are lower-cased; flag attributes map to "".
    """
    jar = SimpleCookie()
    jar.load(header)
    (name, morsel), = jar.items()
    attrs = {k.lower(): str(v) for k, v in morsel.items() if v not in ("", False)}
    if morsel["secure"]:
        attrs["secure"] = ""
    if morsel["httponly"]:
        attrs["httponly"] = ""
    return name, morsel.value, attrs
