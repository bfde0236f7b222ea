from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ReviewCreate(SQLModel):
    """
    Payload for submitting a provider review.

    Validation rules:
      - rating is a whole number of stars, 1..5
      - comment cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    comment: str = Field(max_length=2000)

    @field_validator("comment")
    @classmethod
    def normalize_comment(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please write a review")
        return v


class ReviewRead(SQLModel):
    """Row of the `reviews` table as returned to clients."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    provider_id: str
    customer_id: str | None = None
    customer_name: str | None = None
    rating: float = 0
    comment: str | None = None
    service_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReviewSummary(SQLModel):
    """
    All reviews of one provider, newest first, with aggregate numbers.
    """

    reviews: list[ReviewRead] = []
    total_reviews: int = 0
    average_rating: float = 0.0
