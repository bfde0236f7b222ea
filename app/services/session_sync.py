import logging
import threading
from typing import Callable

from app.core.auth import AuthClient, Subscription
from app.core.cookies import AuthCookieSet, CookieJar, write_auth_cookies
from app.models.session import AuthSession, UserType
from app.repositories.provider_repo import ProviderRepository

logger = logging.getLogger(__name__)

ProviderLookup = Callable[[str], "str | None"]


def derive_cookie_set(
    session: AuthSession | None,
    provider_lookup: ProviderLookup,
) -> AuthCookieSet:
    """
    Compute the auth cookies for a session.

    Rules:
      - no session                -> unauthenticated (all cookies cleared)
      - session                   -> is-authenticated=true, user-type from metadata
      - provider session          -> provider-id from the providers table when found

    A failing provider lookup is logged and ignored; the other two cookies
    are still produced.
    """
    if session is None:
        return AuthCookieSet()

    provider_id: str | None = None
    if session.user_type is UserType.PROVIDER:
        try:
            provider_id = provider_lookup(session.user_id)
        except Exception as e:
            logger.warning("SessionSync: could not fetch provider id: %s", e)

    return AuthCookieSet(
        is_authenticated=True,
        user_type=session.user_type,
        provider_id=provider_id,
    )


class SessionSynchronizer:
    """
    Keeps a cookie jar in step with the Supabase session.

    `start()` syncs the current session once and then follows every
    auth-state change. Deliveries are serialized: two syncs never
    interleave their cookie writes, and the last one wins.
    """

    def __init__(
        self,
        auth: AuthClient,
        providers: ProviderRepository,
        jar: CookieJar,
    ):
        self.auth = auth
        self.providers = providers
        self.jar = jar
        self._lock = threading.Lock()
        self._subscription: Subscription | None = None

    def sync(self, session: AuthSession | None) -> None:
        with self._lock:
            cookie_set = derive_cookie_set(session, self.providers.get_id_for_user)
            write_auth_cookies(self.jar, cookie_set)
        if session is not None:
            logger.info("SessionSync: user authenticated: %s", session.email)

    def on_auth_state_change(self, event: str, session: AuthSession | None) -> None:
        logger.info("SessionSync: auth state changed: %s", event)
        self.sync(session)

    def start(self) -> Subscription:
        try:
            self.sync(self.auth.get_session())
        except Exception as e:
            logger.error("SessionSync: initial session check failed: %s", e)
        self._subscription = self.auth.subscribe(self)
        return self._subscription

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
