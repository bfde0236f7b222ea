from app.models.session import AuthSession, SessionMetadata, UserType

from tests.conftest import make_session, make_user


def test_missing_user_type_defaults_to_customer():
    assert SessionMetadata.from_bag({}).user_type is UserType.CUSTOMER
    assert SessionMetadata.from_bag(None).user_type is UserType.CUSTOMER


def test_unknown_user_type_defaults_to_customer():
    assert SessionMetadata.from_bag({"user_type": "admin"}).user_type is UserType.CUSTOMER


def test_provider_metadata_is_normalized():
    meta = SessionMetadata.from_bag({"user_type": " Provider ", "provider_id": "  "})
    assert meta.user_type is UserType.PROVIDER
    assert meta.provider_id is None


def test_from_supabase_without_user_is_none():
    assert AuthSession.from_supabase(None) is None
    assert AuthSession.from_supabase(make_session(user=None)) is None


def test_from_supabase_reads_identity_and_expiry():
    session = AuthSession.from_supabase(
        make_session(make_user("u-7", "bo@example.com", user_type="provider"), 1_700_000_000)
    )
    assert session.user_id == "u-7"
    assert session.email == "bo@example.com"
    assert session.is_provider
    assert session.expires_at.year == 2023


def test_display_name_is_typed_metadata():
    meta = SessionMetadata.from_bag({"name": "  Chioma Obi ", "avatar": "x.png"})
    assert meta.name == "Chioma Obi"
    assert SessionMetadata.from_bag({"name": "   "}).name is None

    session = AuthSession.from_user(make_user(name="Chioma"))
    assert session.metadata.name == "Chioma"
    assert "raw_metadata" not in AuthSession.model_fields
