from fastapi import APIRouter, Depends, Response

from app.core.auth import get_access_token, get_app_settings
from app.core.config import Settings
from app.core.cookies import CookieJar
from app.schemas.auth import LogoutResponse, ProtectedResponse, SessionSyncResponse
from app.schemas.otp import (
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
)
from app.routers.deps import get_auth_service, get_otp_service
from app.services.auth_service import AuthService
from app.services.otp_service import OtpService

router = APIRouter(prefix="/api", tags=["Auth"])


@router.get("/protected", response_model=ProtectedResponse)
def read_protected(
    token: str | None = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service),
):
    """
    Return the caller's identity.

    Auth:
      - Bearer token or sb-access-token cookie (Supabase JWT).
    """
    return service.get_protected(token)


@router.post("/auth/session", response_model=SessionSyncResponse)
def sync_session(
    response: Response,
    token: str | None = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Mirror the caller's Supabase session into the auth cookies read by
    the route guard.

    Called by the browser on load and after every auth state change.
    No or invalid token clears the cookies.
    """
    jar = CookieJar(secure=settings.COOKIE_SECURE)
    result = service.sync_session(token, jar)
    jar.apply(response)
    return result


@router.post("/auth/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    token: str | None = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Best-effort logout: revoking the caller's Supabase session and
    clearing the cookies run side by side; individual failures are logged
    and the call still succeeds.
    """
    jar = CookieJar(secure=settings.COOKIE_SECURE)
    await service.logout(jar, token)
    jar.apply(response)
    return LogoutResponse()


@router.post("/send-otp", response_model=OtpSendResponse)
def send_otp(
    payload: OtpSendRequest,
    service: OtpService = Depends(get_otp_service),
):
    """
    E-mail an 8-digit verification code (valid 10 minutes).
    """
    return service.send(payload)


@router.post("/verify-otp", response_model=OtpVerifyResponse)
def verify_otp(
    payload: OtpVerifyRequest,
    service: OtpService = Depends(get_otp_service),
):
    """
    Verify a code issued by /send-otp or by Supabase.
    """
    return service.verify(payload)
