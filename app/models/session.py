from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator


class UserType(str, Enum):
    """Application role carried in Supabase `user_metadata.user_type`."""

    CUSTOMER = "customer"
    PROVIDER = "provider"


class SessionMetadata(BaseModel):
    """
    Typed view of the Supabase `user_metadata` bag.

    Normalization rules:
      - missing or unknown `user_type` -> customer
      - blank `provider_id` -> None
      - blank `name` -> None
    """

    model_config = ConfigDict(frozen=True)

    user_type: UserType = UserType.CUSTOMER
    provider_id: str | None = None
    name: str | None = None

    @field_validator("user_type", mode="before")
    @classmethod
    def normalize_user_type(cls, v: Any) -> UserType:
        if isinstance(v, UserType):
            return v
        if isinstance(v, str):
            try:
                return UserType(v.strip().lower())
            except ValueError:
                pass
        return UserType.CUSTOMER

    @field_validator("provider_id", "name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @classmethod
    def from_bag(cls, bag: Mapping[str, Any] | None) -> "SessionMetadata":
        bag = bag or {}
        return cls(
            user_type=bag.get("user_type"),
            provider_id=bag.get("provider_id"),
            name=bag.get("name"),
        )


class AuthSession(BaseModel):
    """
    Read-only view of a session issued by Supabase Auth.

    The app never creates sessions; it only converts the provider's
    session/user objects at the read boundary (`from_supabase`).
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None
    metadata: SessionMetadata = SessionMetadata()
    expires_at: datetime | None = None

    @property
    def user_type(self) -> UserType:
        return self.metadata.user_type

    @property
    def is_provider(self) -> bool:
        return self.metadata.user_type is UserType.PROVIDER

    @classmethod
    def from_user(cls, user: Any, expires_at: int | None = None) -> "AuthSession":
        """Build from a gotrue `User` (or any object with the same attributes)."""
        bag = dict(getattr(user, "user_metadata", None) or {})
        return cls(
            user_id=str(user.id),
            email=getattr(user, "email", None),
            metadata=SessionMetadata.from_bag(bag),
            expires_at=(
                datetime.fromtimestamp(expires_at, tz=timezone.utc)
                if expires_at
                else None
            ),
        )

    @classmethod
    def from_supabase(cls, session: Any) -> "AuthSession | None":
        """
        Convert a gotrue `Session`.

        Returns None when there is no session or it carries no user.
        """
        if session is None or getattr(session, "user", None) is None:
            return None
        return cls.from_user(session.user, getattr(session, "expires_at", None))
