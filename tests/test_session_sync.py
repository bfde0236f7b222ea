import threading
from unittest.mock import MagicMock

import pytest

from app.core.auth import AuthClient
from app.core.cookies import CookieJar
from app.models.session import AuthSession, SessionMetadata
from app.repositories.provider_repo import ProviderRepository
from app.services.session_sync import SessionSynchronizer, derive_cookie_set

from tests.conftest import FakeSupabase, make_session, make_user


def _session(user_type=None, user_id="user-1"):
    return AuthSession(
        user_id=user_id,
        email="ada@example.com",
        metadata=SessionMetadata.from_bag({"user_type": user_type}),
    )


@pytest.fixture
def db():
    db = FakeSupabase()
    db.tables["providers"] = [{"id": "prov-42", "user_id": "user-1"}]
    return db


@pytest.fixture
def synchronizer(db):
    return SessionSynchronizer(AuthClient(db), ProviderRepository(db), CookieJar())


def test_no_session_is_unauthenticated():
    cookie_set = derive_cookie_set(None, lambda _uid: "never")
    assert cookie_set.is_authenticated is False
    assert cookie_set.provider_id is None


def test_missing_user_type_sets_customer(synchronizer):
    synchronizer.sync(_session())
    assert synchronizer.jar.values == {"is-authenticated": "true", "user-type": "customer"}


def test_provider_gets_provider_id_cookie(synchronizer):
    synchronizer.sync(_session("provider"))
    assert synchronizer.jar.get("provider-id") == "prov-42"
    assert synchronizer.jar.get("user-type") == "provider"


def test_provider_without_row_gets_no_provider_id(synchronizer):
    synchronizer.sync(_session("provider", user_id="user-2"))
    assert "provider-id" not in synchronizer.jar
    assert synchronizer.jar.values == {"is-authenticated": "true", "user-type": "provider"}


def test_provider_lookup_failure_is_swallowed(db, synchronizer):
    db.errors[("providers", "select")] = RuntimeError("connection reset")
    synchronizer.sync(_session("provider"))
    assert synchronizer.jar.values == {"is-authenticated": "true", "user-type": "provider"}


def test_customer_does_not_query_providers(db, synchronizer):
    synchronizer.sync(_session("customer"))
    assert not [c for c in db.calls if c[0] == "providers"]


def test_sign_out_clears_cookies(synchronizer):
    synchronizer.sync(_session("provider"))
    synchronizer.sync(None)
    assert synchronizer.jar.values == {}
    cleared = [w.name for w in synchronizer.jar.writes if w.is_clear]
    assert cleared == ["is-authenticated", "user-type", "provider-id"]


def test_start_syncs_current_session_then_follows_events(db):
    db.auth.get_session.return_value = make_session(make_user(user_type="customer"))
    handle = MagicMock()
    db.auth.on_auth_state_change.return_value = handle

    sync = SessionSynchronizer(AuthClient(db), ProviderRepository(db), CookieJar())
    subscription = sync.start()
    assert sync.jar.get("is-authenticated") == "true"

    callback = db.auth.on_auth_state_change.call_args.args[0]
    callback("SIGNED_OUT", None)
    assert sync.jar.values == {}

    callback("SIGNED_IN", make_session(make_user(user_type="provider")))
    assert sync.jar.get("provider-id") == "prov-42"

    sync.stop()
    sync.stop()
    handle.unsubscribe.assert_called_once()
    assert subscription.active is False


def test_initial_check_failure_still_subscribes(db):
    db.auth.get_session.side_effect = RuntimeError("Failed to fetch")
    sync = SessionSynchronizer(AuthClient(db), ProviderRepository(db), CookieJar())
    sync.start()
    db.auth.on_auth_state_change.assert_called_once()
    assert sync.jar.writes == []


def test_deliveries_do_not_interleave(db):
    entered = threading.Event()
    release = threading.Event()
    order = []

    class SlowRepo(ProviderRepository):
        def get_id_for_user(self, user_id):
            order.append("lookup-start")
            entered.set()
            release.wait(timeout=5)
            order.append("lookup-end")
            return "prov-42"

    jar = CookieJar()
    sync = SessionSynchronizer(AuthClient(db), SlowRepo(db), jar)

    t = threading.Thread(target=sync.sync, args=(_session("provider"),))
    t.start()
    entered.wait(timeout=5)

    t2 = threading.Thread(target=sync.sync, args=(None,))
    t2.start()
    release.set()
    t.join(timeout=5)
    t2.join(timeout=5)

    # The sign-out sync waited for the provider sync: last write wins.
    assert order == ["lookup-start", "lookup-end"]
    assert jar.values == {}
    assert [w.name for w in jar.writes][:3] == ["is-authenticated", "user-type", "provider-id"]
