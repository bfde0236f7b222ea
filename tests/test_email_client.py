from unittest.mock import MagicMock, patch

import pytest

from app.core.config import Settings
from app.core.email_client import Mailer


def _settings(**overrides):
    values = dict(
        SUPABASE_URL="https://test.supabase.co",
        SUPABASE_KEY="anon-key",
        SUPABASE_JWT_SECRET="secret",
        SMTP_HOST="smtp.example.com",
        SMTP_USERNAME="no-reply@nimart.ng",
        SMTP_PASSWORD="pw",
    )
    values.update(overrides)
    return Settings(**values)


def test_unconfigured_mailer_refuses_to_send():
    mailer = Mailer(_settings(SMTP_HOST=None, SMTP_PASSWORD=None))
    with pytest.raises(RuntimeError):
        mailer.send_email("ada@example.com", "Hi", "text")


def test_send_email_uses_starttls_and_extra_headers():
    server = MagicMock()
    with patch("app.core.email_client.smtplib.SMTP", return_value=server) as smtp:
        Mailer(_settings()).send_email(
            "ada@example.com",
            "Your code",
            "text body",
            html_body="<p>html</p>",
            headers={"X-Priority": "1"},
        )

    smtp.assert_called_once_with("smtp.example.com", 587, timeout=30)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("no-reply@nimart.ng", "pw")
    (msg,), _ = server.send_message.call_args
    assert msg["To"] == "ada@example.com"
    assert msg["From"] == "Nimart <no-reply@nimart.ng>"
    assert msg["X-Priority"] == "1"
    server.quit.assert_called_once()


def test_send_email_over_ssl():
    server = MagicMock()
    with patch("app.core.email_client.smtplib.SMTP_SSL", return_value=server) as smtp_ssl:
        Mailer(_settings(SMTP_PORT=465, SMTP_USE_SSL=True)).send_email(
            "ada@example.com", "Hi", "text"
        )
    smtp_ssl.assert_called_once_with("smtp.example.com", 465, timeout=30)
    server.starttls.assert_not_called()

