from __future__ import annotations

"""
Email client utilities for the Nimart backend.

Responsibilities:
  - Hold SMTP configuration taken from `Settings`.
  - Provide a single send_email(...) method for services to use.
  - Support both TLS (STARTTLS) and SSL connections.

Typical .env configuration:

    SMTP_HOST=smtp.example.com
    SMTP_PORT=465
    SMTP_USERNAME=no-reply@nimart.ng
    SMTP_PASSWORD=...
    SMTP_FROM_EMAIL=no-reply@nimart.ng
    SMTP_FROM_NAME=Nimart
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true
"""

import logging
import smtplib
from email.message import EmailMessage

from app.core.config import Settings

logger = logging.getLogger(__name__)


class Mailer:
    """
    SMTP sender built once from settings and injected into services.
    """

    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = settings.SMTP_PASSWORD
        # Fallback: if FROM_EMAIL is not set, default to username
        self.from_email = settings.SMTP_FROM_EMAIL or self.username or ""
        self.from_name = settings.SMTP_FROM_NAME
        self.use_tls = settings.SMTP_USE_TLS
        self.use_ssl = settings.SMTP_USE_SSL

    def _create_smtp_client(self) -> smtplib.SMTP:
        """
        Create and return an SMTP client configured for TLS or SSL.

        Priority:
          - If use_ssl is True -> smtplib.SMTP_SSL (e.g. port 465).
          - Else -> smtplib.SMTP + optional STARTTLS if use_tls is True.
        """
        if not self.host:
            raise RuntimeError("SMTP_HOST is not configured. Please set it in .env.")

        if self.use_ssl:
            server: smtplib.SMTP = smtplib.SMTP_SSL(self.host, self.port, timeout=30)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=30)
            if self.use_tls:
                server.starttls()

        return server

    def send_email(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Send an email to a single recipient.

        Parameters
        ----------
        to_email:
            Recipient email address.
        subject:
            Email subject line.
        text_body:
            Plain-text body (fallback for clients without HTML).
        html_body:
            Optional HTML body, sent as an alternative part.
        headers:
            Extra message headers.

        Raises
        ------
        RuntimeError:
            If required SMTP configuration is missing.
        smtplib.SMTPException:
            If the underlying SMTP connection or send fails.
        """
        if not (self.host and self.username and self.password):
            raise RuntimeError(
                "SMTP is not configured correctly. "
                "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
            )

        msg = EmailMessage()
        msg["From"] = (
            f"{self.from_name} <{self.from_email}>" if self.from_email else self.username
        )
        msg["To"] = to_email
        msg["Subject"] = subject
        for name, value in (headers or {}).items():
            msg[name] = value

        msg.set_content(text_body)
        if html_body:
            msg.add_alternative(html_body, subtype="html")

        server = self._create_smtp_client()
        try:
            server.login(self.username, self.password)
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException as e:
                logger.debug("SMTP quit failed: %s", e)
