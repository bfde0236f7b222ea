import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import HTTPException, status
from supabase import AuthApiError

from app.core.auth import AuthClient, decode_access_token
from app.core.config import Settings
from app.core.cookies import CookieJar, clear_auth_cookies
from app.core.errors import friendly_error_message
from app.models.session import AuthSession
from app.repositories.provider_repo import ProviderRepository
from app.schemas.auth import ProtectedResponse, ProtectedUser, SessionSyncResponse
from app.services.session_sync import SessionSynchronizer

logger = logging.getLogger(__name__)

CleanupAction = Callable[[], Awaitable[None]]


async def run_cleanup(actions: dict[str, CleanupAction]) -> None:
    """
    Run independent cleanup actions concurrently.

    Completes once every action has finished; a failing action is only
    logged and never stops the others.
    """
    names = list(actions)
    results = await asyncio.gather(
        *(actions[name]() for name in names), return_exceptions=True
    )
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.warning("Logout cleanup '%s' failed: %s", name, result)
        else:
            logger.info("Logout cleanup '%s' done", name)


class AuthService:
    """
    Session-facing operations used by the auth router.

    Responsibilities:
      - resolve the caller behind an access token
      - mirror a session into auth cookies
      - best-effort logout
    """

    def __init__(
        self,
        auth: AuthClient,
        providers: ProviderRepository,
        settings: Settings,
    ):
        self.auth = auth
        self.providers = providers
        self.settings = settings

    def get_protected(self, access_token: str | None) -> ProtectedResponse:
        """
        Raises:
            HTTPException(401): no token, or the JWT does not verify.
            HTTPException(404): Supabase rejects the token or has no user for it.
            HTTPException(500): unexpected failure.
        """
        if not access_token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
            )
        decode_access_token(access_token, self.settings)

        try:
            user = self.auth.get_user(access_token)
        except AuthApiError as e:
            logger.info("User lookup failed: %s", friendly_error_message(e))
            user = None
        except Exception as e:
            logger.error("Protected route error: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )

        return ProtectedResponse(
            user=ProtectedUser(
                id=user.user_id,
                email=user.email,
                user_type=user.user_type,
            )
        )

    def resolve_session(self, access_token: str | None) -> AuthSession | None:
        """User behind the token, or None for guests and rejected tokens."""
        if not access_token:
            return None
        try:
            return self.auth.get_user(access_token)
        except Exception as e:
            logger.info("Session check error: %s", friendly_error_message(e))
            return None

    def sync_session(self, access_token: str | None, jar: CookieJar) -> SessionSyncResponse:
        session = self.resolve_session(access_token)
        SessionSynchronizer(self.auth, self.providers, jar).sync(session)
        return SessionSyncResponse(
            authenticated=session is not None,
            user_type=session.user_type if session else None,
            provider_id=jar.get("provider-id"),
        )

    async def logout(self, jar: CookieJar, access_token: str | None) -> None:
        """
        Revoke the caller's session (when a token came with the request)
        and clear every auth cookie.
        """

        async def sign_out() -> None:
            await asyncio.to_thread(self.auth.sign_out, access_token)

        async def clear_cookies() -> None:
            clear_auth_cookies(jar, include_tokens=True)

        actions: dict[str, CleanupAction] = {"cookies": clear_cookies}
        if access_token:
            actions["sign_out"] = sign_out
        await run_cleanup(actions)
        logger.info("All auth data cleared")
