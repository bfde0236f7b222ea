from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.services.otp_service import generate_otp, render_otp_email


def test_generate_otp_is_eight_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 8 and code.isdigit() and code[0] != "0"


def test_render_otp_email_contains_code():
    subject, html, text = render_otp_email("12345678", 2026)
    assert subject == "Your Nimart Verification Code: 12345678"
    assert "12345678" in html and "&copy; 2026 Nimart" in html
    assert "expires in 10 minutes" in text


def test_send_otp_stores_code_and_mails_it(client, supabase, mailer):
    resp = client.post("/api/send-otp", json={"email": "  ada@example.com "})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["message"] == "Verification code sent successfully"

    (row,) = supabase.tables["otp_storage"]
    assert row["email"] == "ada@example.com"
    assert row["type"] == "signup"
    expires = datetime.fromisoformat(row["expires_at"])
    created = datetime.fromisoformat(row["created_at"])
    assert expires - created == timedelta(minutes=10)

    kwargs = mailer.send_email.call_args.kwargs
    assert kwargs["to_email"] == "ada@example.com"
    assert row["otp"] in kwargs["subject"]

    supabase.auth.sign_in_with_otp.assert_called_once()
    options = supabase.auth.sign_in_with_otp.call_args.args[0]["options"]
    assert options == {
        "should_create_user": False,
        "email_redirect_to": "https://nimart.ng/verify",
    }


def test_send_otp_replaces_previous_code(client, supabase):
    client.post("/api/send-otp", json={"email": "ada@example.com"})
    client.post("/api/send-otp", json={"email": "ada@example.com", "type": "login"})
    rows = supabase.tables["otp_storage"]
    assert len(rows) == 1 and rows[0]["type"] == "login"


def test_send_otp_tolerates_supabase_and_storage_errors(client, supabase, mailer):
    supabase.auth.sign_in_with_otp.side_effect = Exception("Signups not allowed for otp")
    supabase.errors[("otp_storage", "upsert")] = RuntimeError("db down")
    resp = client.post("/api/send-otp", json={"email": "ada@example.com"})
    assert resp.status_code == 200
    mailer.send_email.assert_called_once()


def test_send_otp_mail_failure_is_500(client, mailer):
    mailer.send_email.side_effect = RuntimeError("SMTP is not configured correctly.")
    resp = client.post("/api/send-otp", json={"email": "ada@example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to send verification code"}


def test_send_otp_rejects_bad_email(client):
    assert client.post("/api/send-otp", json={"email": "nope"}).status_code == 422


def test_verify_otp_via_supabase(client, supabase):
    supabase.scoped_auth.verify_otp.return_value = SimpleNamespace(user=SimpleNamespace(
        id="user-1", email="ada@example.com", user_metadata={}
    ))
    resp = client.post("/api/verify-otp", json={"email": "ada@example.com", "token": "12345678"})
    assert resp.json() == {"success": True, "user_id": "user-1"}


def test_verify_otp_leaves_shared_client_anonymous(client, supabase):
    supabase.scoped_auth.verify_otp.return_value = SimpleNamespace(user=SimpleNamespace(
        id="user-9", email="zainab@example.com", user_metadata={}
    ))
    before = dict(supabase.options.headers)

    resp = client.post("/api/verify-otp", json={"email": "zainab@example.com", "token": "12345678"})

    assert resp.status_code == 200
    assert supabase.options.headers == before
    assert supabase.options.headers["Authorization"] == "Bearer anon-key"
    supabase.auth.verify_otp.assert_not_called()
    (verifier,) = supabase.scoped_clients
    assert verifier.access_token is None


def test_verify_otp_falls_back_to_stored_code(client, supabase):
    supabase.scoped_auth.verify_otp.side_effect = Exception("Token has expired or is invalid")
    future = (datetime.now(timezone.utc) + timedelta(minutes=5)).isoformat()
    supabase.tables["otp_storage"] = [
        {"email": "ada@example.com", "otp": "12345678", "expires_at": future,
         "type": "signup", "created_at": future}
    ]
    resp = client.post("/api/verify-otp", json={"email": "ada@example.com", "token": " 12345678 "})
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert supabase.tables["otp_storage"] == []


def test_verify_otp_expired_code_is_400(client, supabase):
    supabase.scoped_auth.verify_otp.side_effect = Exception("Token has expired or is invalid")
    past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    supabase.tables["otp_storage"] = [
        {"email": "ada@example.com", "otp": "12345678", "expires_at": past,
         "type": "signup", "created_at": past}
    ]
    resp = client.post("/api/verify-otp", json={"email": "ada@example.com", "token": "12345678"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid or expired OTP. Please request a new one."}
