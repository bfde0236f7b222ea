import logging
import threading
from typing import Any, Callable, Protocol

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from supabase import Client

from app.core.config import Settings
from app.core.supabase_client import get_supabase
from app.models.session import AuthSession

logger = logging.getLogger(__name__)

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so routes can fall back to the sb-access-token cookie or answer 401 themselves.
bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "sb-access-token"


class AuthStateListener(Protocol):
    def on_auth_state_change(self, event: str, session: AuthSession | None) -> None:
        ...


class Subscription:
    """
    Cancellable handle for an auth-state subscription.

    `unsubscribe()` is idempotent.
    """

    def __init__(self, cancel: Callable[[], Any]):
        self._cancel = cancel
        self._lock = threading.Lock()
        self.active = True

    def unsubscribe(self) -> None:
        with self._lock:
            if not self.active:
                return
            self.active = False
        self._cancel()


class AuthClient:
    """
    Thin wrapper over Supabase Auth (gotrue).

    Every session or user object leaving this class is an `AuthSession`;
    the raw metadata bag never reaches the rest of the app.
    """

    def __init__(self, supabase: Client):
        self._auth = supabase.auth

    def get_session(self) -> AuthSession | None:
        """Session currently held by the client, or None."""
        return AuthSession.from_supabase(self._auth.get_session())

    def get_user(self, access_token: str | None = None) -> AuthSession | None:
        """
        Resolve the user behind an access token.

        Returns None when Supabase knows no such user.

        Raises:
            gotrue errors if the token is rejected.
        """
        response = self._auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return AuthSession.from_user(response.user)

    def sign_in_with_otp(self, email: str, redirect_to: str) -> None:
        """Ask Supabase to e-mail its own one-time code (existing users only)."""
        self._auth.sign_in_with_otp(
            {
                "email": email,
                "options": {
                    "should_create_user": False,
                    "email_redirect_to": redirect_to,
                },
            }
        )

    def verify_otp(self, email: str, token: str) -> AuthSession | None:
        """
        Check a Supabase e-mail OTP.

        A successful check stores the new session on this client, so call
        it on a request-scoped client, never on the shared one.
        """
        response = self._auth.verify_otp(
            {"email": email, "token": token, "type": "email"}
        )
        if response is None or response.user is None:
            return None
        return AuthSession.from_user(response.user)

    def sign_out(self, access_token: str) -> None:
        """
        Revoke the session behind `access_token`.

        Goes through the admin endpoint with the caller's own token, so no
        session is ever loaded into this client.
        """
        self._auth.admin.sign_out(access_token)

    def subscribe(self, listener: AuthStateListener) -> Subscription:
        """
        Forward auth-state transitions (sign-in, sign-out, token refresh)
        to `listener`, in the order Supabase emits them.
        """

        def _callback(event: Any, session: Any) -> None:
            name = getattr(event, "value", event)
            listener.on_auth_state_change(str(name), AuthSession.from_supabase(session))

        handle = self._auth.on_auth_state_change(_callback)
        return Subscription(handle.unsubscribe)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


def get_auth_client(supabase: Client = Depends(get_supabase)) -> AuthClient:
    return AuthClient(supabase)


def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """
    Access token from `Authorization: Bearer ...`, falling back to the
    `sb-access-token` cookie. None for guests.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Strict variant: only an Authorization header counts.

    Raises:
        HTTPException(401): header missing or not a Bearer token.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return credentials.credentials


def require_auth(
    token: str = Depends(get_bearer_token),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthSession:
    """
    Enforce authentication against Supabase.

    Raises:
        HTTPException(401): token rejected or no user behind it.
    """
    try:
        user = auth.get_user(token)
    except Exception as e:
        logger.info("Token rejected by Supabase: %s", e)
        user = None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (see `create_app`)."""
    return request.app.state.settings
