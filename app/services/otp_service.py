import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import HTTPException, status

from app.core.auth import AuthClient
from app.core.email_client import Mailer
from app.repositories.otp_repo import OtpRepository
from app.schemas.otp import (
    OtpRecord,
    OtpSendRequest,
    OtpSendResponse,
    OtpVerifyRequest,
    OtpVerifyResponse,
)

logger = logging.getLogger(__name__)

OTP_DIGITS = 8
OTP_TTL = timedelta(minutes=10)

LOGO_URL = (
    "https://jauxqeahsxxlcabjxdvb.supabase.co/storage/v1/object/public/email/"
    "new%20logo.png"
)


def generate_otp() -> str:
    """Random 8-digit code, never starting with 0."""
    low = 10 ** (OTP_DIGITS - 1)
    return str(low + secrets.randbelow(9 * low))


def render_otp_email(otp: str, year: int) -> tuple[str, str, str]:
    """Return (subject, html, text) for the verification mail."""
    subject = f"Your Nimart Verification Code: {otp}"
    html = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Nimart Verification Code</title>
</head>
<body style="margin: 0; padding: 15px; font-family: 'Segoe UI', Arial, sans-serif; background-color: #f7f9fc; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; background-color: white; border-radius: 12px; overflow: hidden;">
        <div style="background-color: #008751; height: 4px;"></div>
        <div style="padding: 30px 20px;">
            <div style="text-align: center; margin-bottom: 25px;">
                <img src="{LOGO_URL}" alt="Nimart Logo" style="height: 40px; max-width: 150px;">
                <p style="margin-top: 5px; color: #666; font-size: 13px;">Secure Account Verification</p>
            </div>
            <h2 style="color: #222; margin-bottom: 8px; font-weight: 600; font-size: 18px;">Your Verification Code</h2>
            <p style="color: #555; line-height: 1.5; margin-bottom: 25px; font-size: 15px;">To complete your verification process, please use the following 8-digit code:</p>
            <div style="text-align: center; margin: 30px 0; padding: 20px; background-color: #f0f9f5; border-radius: 8px; border-left: 4px solid #008751;">
                <p style="margin-top: 0; color: #555; font-size: 13px; margin-bottom: 8px;">Enter this code on the verification page:</p>
                <div style="font-size: 32px; font-weight: 700; color: #008751; letter-spacing: 6px; padding: 8px; background-color: white; border-radius: 6px; display: inline-block;">
                    {otp}
                </div>
                <p style="margin-bottom: 0; color: #777; font-size: 13px; margin-top: 12px;">Code expires in <strong>10 minutes</strong></p>
            </div>
            <div style="margin-top: 25px; padding-top: 15px; border-top: 1px solid #eee;">
                <p style="color: #777; font-size: 12px; text-align: center;">
                    <strong>Security Notice:</strong> Never share this code with anyone. Nimart will never ask for your password or verification code via email or phone.
                </p>
            </div>
        </div>
        <div style="background-color: #f8f9fa; padding: 20px; border-top: 1px solid #eee; color: #777; font-size: 11px; line-height: 1.4; text-align: right;">
            <strong>Nimart</strong> &bull; Banex junction Wuse, Abuja Municipal Area Council 900001<br>
            Federal Capital Territory, Nigeria<br>
            <a href="mailto:info@nimart.ng" style="color: #008751; text-decoration: none;">info@nimart.ng</a>
            <div style="color: #aaa; margin-top: 10px; font-size: 10px;">&copy; {year} Nimart. All rights reserved.</div>
        </div>
    </div>
</body>
</html>"""
    text = (
        f"Your Nimart Verification Code: {otp}\n\n"
        "Enter this 8-digit code on the verification page. "
        "This code expires in 10 minutes.\n\n"
        "Security Notice: Never share this code with anyone.\n\n"
        "Nimart\nBanex junction Wuse, Abuja\ninfo@nimart.ng"
    )
    return subject, html, text


class OtpService:
    """
    E-mail OTP issue and verification.

    Two channels run side by side: Supabase's own magic-link OTP, and our
    8-digit code kept in `otp_storage` and mailed over SMTP. Either one
    verifies the address.

    `verifier` hands out a fresh auth client per verification; a verified
    Supabase OTP leaves a session on the client it ran on, and that client
    is thrown away with it.
    """

    def __init__(
        self,
        auth: AuthClient,
        repo: OtpRepository,
        mailer: Mailer,
        app_url: str,
        verifier: Callable[[], AuthClient],
    ):
        self.auth = auth
        self.verifier = verifier
        self.repo = repo
        self.mailer = mailer
        self.app_url = app_url.rstrip("/")

    def send_otp_email(self, email: str, otp: str) -> None:
        subject, html, text = render_otp_email(otp, datetime.now(timezone.utc).year)
        self.mailer.send_email(
            to_email=email,
            subject=subject,
            text_body=text,
            html_body=html,
            headers={
                "X-Entity-Ref-ID": f"nimart-otp-{int(time.time() * 1000)}",
                "List-Unsubscribe": "<https://nimart.ng/unsubscribe>",
                "X-Priority": "1",
                "X-Mailer": "Nimart Platform",
            },
        )
        logger.info("OTP email sent to %s", email)

    def send(self, payload: OtpSendRequest) -> OtpSendResponse:
        """
        Issue a code.

        Supabase OTP and storage failures are logged and ignored; only a
        failed mail send fails the request.

        Raises:
            HTTPException(500): the e-mail could not be sent.
        """
        email = str(payload.email)
        logger.info("Sending OTP to %s", email)

        try:
            self.auth.sign_in_with_otp(email, redirect_to=f"{self.app_url}/verify")
        except Exception as e:
            logger.info("Supabase OTP error (non-fatal): %s", e)

        otp = generate_otp()
        now = datetime.now(timezone.utc)
        try:
            self.repo.upsert(
                OtpRecord(
                    email=email,
                    otp=otp,
                    expires_at=now + OTP_TTL,
                    type=payload.type,
                    created_at=now,
                )
            )
        except Exception as e:
            logger.error("OTP storage error: %s", e)

        try:
            self.send_otp_email(email, otp)
        except Exception as e:
            logger.error("Email sending error: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send verification code",
            )

        return OtpSendResponse(
            success=True,
            message="Verification code sent successfully",
            note="Check your inbox (and spam folder if not found)",
        )

    def verify(self, payload: OtpVerifyRequest) -> OtpVerifyResponse:
        """
        Check a code against Supabase first, then against `otp_storage`.

        A stored code is single use: it is deleted once accepted.

        Raises:
            HTTPException(400): neither channel accepts the code.
        """
        email = str(payload.email)

        try:
            user = self.verifier().verify_otp(email, payload.token)
            if user is not None:
                return OtpVerifyResponse(success=True, user_id=user.user_id)
        except Exception as e:
            logger.info("Supabase OTP verification failed, trying stored code: %s", e)

        record = self.repo.find_valid(email, payload.token, datetime.now(timezone.utc))
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid or expired OTP. Please request a new one.",
            )

        try:
            self.repo.delete_for_email(email)
        except Exception as e:
            logger.warning("Could not delete used OTP for %s: %s", email, e)

        return OtpVerifyResponse(success=True)
