from fastapi import Depends, Request
from supabase import Client

from app.core.auth import AuthClient, get_access_token, get_app_settings, get_auth_client
from app.core.config import Settings
from app.core.email_client import Mailer
from app.core.supabase_client import ClientFactory, get_client_factory, get_supabase
from app.repositories.notification_repo import NotificationRepository
from app.repositories.otp_repo import OtpRepository
from app.repositories.provider_repo import ProviderRepository
from app.repositories.review_repo import ReviewRepository
from app.services.auth_service import AuthService
from app.services.notification_service import NotificationService
from app.services.otp_service import OtpService
from app.services.provider_service import ProviderService
from app.services.review_service import ReviewService
from app.services.seo_service import SeoService

# Service factories. Everything is built from the clients and settings on
# app.state, so tests can swap them per app instance.


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_caller_supabase(
    token: str | None = Depends(get_access_token),
    shared: Client = Depends(get_supabase),
    factory: ClientFactory = Depends(get_client_factory),
) -> Client:
    """
    Client whose table calls run as the caller.

    Guests get the shared anon client; a request with an access token
    gets its own client carrying that token, dropped after the request.
    """
    if not token:
        return shared
    return factory(token)


def get_provider_repo(supabase: Client = Depends(get_caller_supabase)) -> ProviderRepository:
    return ProviderRepository(supabase)


def get_auth_service(
    auth: AuthClient = Depends(get_auth_client),
    providers: ProviderRepository = Depends(get_provider_repo),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(auth, providers, settings)


def get_otp_service(
    supabase: Client = Depends(get_supabase),
    factory: ClientFactory = Depends(get_client_factory),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_app_settings),
) -> OtpService:
    return OtpService(
        AuthClient(supabase),
        OtpRepository(supabase),
        mailer,
        settings.APP_URL,
        verifier=lambda: AuthClient(factory(None)),
    )


def get_provider_service(
    providers: ProviderRepository = Depends(get_provider_repo),
    auth: AuthClient = Depends(get_auth_client),
) -> ProviderService:
    return ProviderService(providers, auth)


def get_review_service(supabase: Client = Depends(get_caller_supabase)) -> ReviewService:
    return ReviewService(ReviewRepository(supabase))


def get_notification_service(
    supabase: Client = Depends(get_caller_supabase),
) -> NotificationService:
    return NotificationService(NotificationRepository(supabase))


def get_seo_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_app_settings),
) -> SeoService:
    return SeoService(ProviderRepository(supabase), settings.APP_URL)
