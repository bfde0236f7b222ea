from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.models.session import UserType


class ProtectedUser(SQLModel):
    id: str
    email: str | None = None
    user_type: UserType | None = None


class ProtectedResponse(SQLModel):
    user: ProtectedUser
    message: str = "This is protected data"


class SessionSyncResponse(SQLModel):
    """Result of mirroring the caller's Supabase session into cookies."""

    model_config = ConfigDict(extra="forbid")

    authenticated: bool
    user_type: UserType | None = None
    provider_id: str | None = None


class LogoutResponse(SQLModel):
    success: bool = True
    redirect: str = "/login?logout=true"
