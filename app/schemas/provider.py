from datetime import datetime
from typing import Literal

from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

SortOption = Literal["distance", "rating", "newest", "bookings", "response"]


class NamedRef(SQLModel):
    """Embedded `{name}` object returned by joined selects (states, lgas)."""

    model_config = ConfigDict(extra="ignore")

    name: str


class ProviderRead(SQLModel):
    """
    Marketplace listing view of a provider row.

    Mirrors the columns selected by `ProviderRepository.LISTING_COLUMNS`.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    business_name: str
    service_type: str
    rating: float | None = None
    total_reviews: int | None = None
    profile_picture_url: str | None = None
    state_id: str | None = None
    lga_id: str | None = None
    states: list[NamedRef] | None = None
    lgas: list[NamedRef] | None = None
    years_experience: int | None = None
    is_verified: bool | None = None
    created_at: datetime
    bio: str | None = None
    total_bookings: int | None = None
    response_time: str | None = None
    city: str | None = None

    @field_validator("states", "lgas", mode="before")
    @classmethod
    def embed_as_list(cls, v: Any) -> Any:
        # Many-to-one embeds come back as a single object
        if isinstance(v, dict):
            return [v]
        return v

    @property
    def state_name(self) -> str | None:
        return self.states[0].name if self.states else None

    @property
    def lga_name(self) -> str | None:
        return self.lgas[0].name if self.lgas else None


class ProviderContact(SQLModel):
    """Contact details, only served to signed-in users."""

    phone: str | None = None
    email: str | None = None
    business_name: str | None = None
