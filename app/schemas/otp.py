from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

OtpType = Literal["signup", "login", "recovery", "email_change"]


class OtpSendRequest(SQLModel):
    """
    Body of POST /api/send-otp.
    """

    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    type: OtpType = "signup"

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v


class OtpSendResponse(SQLModel):
    success: bool
    message: str
    note: str | None = None


class OtpVerifyRequest(SQLModel):
    """
    Body of POST /api/verify-otp.

    Codes are 8 digits; surrounding whitespace is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    token: str = Field(min_length=6, max_length=10)

    @field_validator("email", "token", mode="before")
    @classmethod
    def strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class OtpVerifyResponse(SQLModel):
    success: bool
    user_id: str | None = None


class OtpRecord(SQLModel):
    """Row of the `otp_storage` table (one per email)."""

    email: str
    otp: str
    expires_at: datetime
    type: str
    created_at: datetime
