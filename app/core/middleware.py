"""
Route guard.

Runs ahead of routing on every request. It never talks to Supabase: the
only input is the `is-authenticated` cookie written by the session sync
endpoint. There is no role-based check here; any authenticated user may
reach any non-public route.
"""

import logging
import re
from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from app.core.cookies import read_auth_cookies

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

SECURITY_HEADERS: dict[str, str] = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
}

STATIC_PREFIXES: tuple[str, ...] = ("/_next", "/_vercel")
STATIC_EXTENSION_RE = re.compile(
    r"\.(ico|png|jpg|jpeg|gif|svg|css|js|woff|woff2|ttf|eot)$", re.IGNORECASE
)

PUBLIC_ROUTES: tuple[str, ...] = (
    "/",
    "/login",
    "/register",
    "/forgot-password",
    "/auth/reset-password",
    "/verify",
    "/auth/callback",
    "/marketplace",
    "/provider/register",
    "/provider/benefits",
    "/provider/terms",
    "/provider/how-it-works",
    "/about",
    "/contact",
    "/help",
    "/privacy",
    "/terms",
    "/sitemap.xml",
    "/robots.txt",
    "/api/sitemap",
    "/api/health",
    "/api/providers",
    "/api/services",
    "/manifest.json",
)

# /providers/:id and /services/:id
PUBLIC_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^/providers/[^/]+$"),
    re.compile(r"^/services/[^/]+$"),
)

# API routes that are reachable without the cookie. The auth endpoints
# check bearer tokens themselves and answer with JSON errors.
PUBLIC_API_ROUTES: frozenset[str] = frozenset(
    {
        "/api/sitemap",
        "/api/health",
        "/api/providers",
        "/api/services",
        "/api/protected",
        "/api/send-otp",
        "/api/verify-otp",
        "/api/auth/session",
        "/api/auth/logout",
        "/api/notifications/booking",
        "/api/notifications/message",
        "/api/location/distance",
        "/api/location/proximity",
        "/api/seo/home",
        "/api/seo/marketplace",
    }
)


@dataclass(frozen=True)
class GuardDecision:
    allow: bool
    redirect_to: str | None = None


def is_static_path(path: str) -> bool:
    return path.startswith(STATIC_PREFIXES) or bool(STATIC_EXTENSION_RE.search(path))


def is_public_path(path: str) -> bool:
    if any(p.match(path) for p in PUBLIC_PATTERNS):
        return True
    for route in PUBLIC_ROUTES:
        if path == route:
            return True
        # "/" is matched exactly, never as a prefix
        if route != "/" and path.startswith(route + "/"):
            return True
    return path in PUBLIC_API_ROUTES


def login_redirect_url(path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({'redirect': path})}"


def guard_decision(path: str, cookies: Mapping[str, str]) -> GuardDecision:
    """
    Decide whether a request may proceed.

      1. static assets           -> allow
      2. public pages / APIs     -> allow
      3. is-authenticated=true   -> allow
      4. otherwise               -> redirect to /login?redirect=<path>
    """
    if is_static_path(path) or is_public_path(path):
        return GuardDecision(allow=True)

    if read_auth_cookies(cookies).is_authenticated:
        return GuardDecision(allow=True)

    return GuardDecision(allow=False, redirect_to=login_redirect_url(path))


def apply_security_headers(response: Response) -> Response:
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


class RouteGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        decision = guard_decision(path, request.cookies)

        if not decision.allow:
            logger.info("Route guard: redirecting to login from %s", path)
            response: Response = RedirectResponse(decision.redirect_to, status_code=307)
            return apply_security_headers(response)

        response = await call_next(request)
        return apply_security_headers(response)
