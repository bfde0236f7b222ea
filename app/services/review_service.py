import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from postgrest.exceptions import APIError

from app.models.session import AuthSession, UserType
from app.repositories.review_repo import ReviewRepository
from app.schemas.review import ReviewCreate, ReviewSummary

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_TYPE = "General Service"

# Postgres error code -> (HTTP status, user message)
INSERT_ERRORS: dict[str, tuple[int, str]] = {
    "42501": (status.HTTP_403_FORBIDDEN, "Permission denied. Please contact support."),
    "23505": (status.HTTP_409_CONFLICT, "You have already reviewed this provider."),
}


def customer_display_name(user: AuthSession) -> str:
    """Metadata name, else the e-mail local part, else "Anonymous"."""
    if user.metadata.name:
        return user.metadata.name
    if user.email:
        return user.email.split("@", 1)[0]
    return "Anonymous"


class ReviewService:
    """
    Business logic for provider reviews.

    Responsibilities:
      - list reviews with count / average rating
      - only customers may review
      - map Postgres insert errors to HTTP errors
    """

    def __init__(self, repo: ReviewRepository):
        self.repo = repo

    def get_summary(self, provider_id: str) -> ReviewSummary:
        """
        Reviews newest first plus totals.

        A failed load is logged and reported as "no reviews".
        """
        try:
            reviews = self.repo.list_for_provider(provider_id)
        except Exception as e:
            logger.error("Error loading reviews for %s: %s", provider_id, e)
            return ReviewSummary()

        total = len(reviews)
        average = sum(r.rating or 0 for r in reviews) / total if total else 0.0
        return ReviewSummary(
            reviews=reviews,
            total_reviews=total,
            average_rating=round(average, 2),
        )

    def submit(
        self,
        provider_id: str,
        user: AuthSession,
        payload: ReviewCreate,
    ) -> None:
        """
        Insert a review written by `user`.

        Raises:
            HTTPException(403): user is not a customer, or RLS refused the row.
            HTTPException(409): user already reviewed this provider.
            HTTPException(500): any other insert failure.
        """
        if user.user_type is not UserType.CUSTOMER:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only customers can submit reviews",
            )

        now = datetime.now(timezone.utc).isoformat()
        row = {
            "provider_id": provider_id,
            "customer_id": user.user_id,
            "customer_name": customer_display_name(user),
            "rating": payload.rating,
            "comment": payload.comment,
            "service_type": DEFAULT_SERVICE_TYPE,
            "created_at": now,
            "updated_at": now,
        }

        try:
            self.repo.create(row)
        except APIError as e:
            logger.error("Review submission error: %s", e)
            status_code, detail = INSERT_ERRORS.get(
                str(e.code),
                (
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Failed to submit review. Please try again.",
                ),
            )
            raise HTTPException(status_code=status_code, detail=detail)

        logger.info("Review submitted for provider %s", provider_id)
