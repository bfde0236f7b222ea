import logging
from datetime import datetime, timezone

from app.repositories.notification_repo import NotificationRepository
from app.schemas.notification import BookingInfo, NotificationCreate, NotificationRow

logger = logging.getLogger(__name__)

MESSAGE_PREVIEW_CHARS = 50


def message_preview(message: str) -> str:
    if len(message) > MESSAGE_PREVIEW_CHARS:
        return message[:MESSAGE_PREVIEW_CHARS] + "..."
    return message


class NotificationService:
    """
    In-app notifications.

    Every send is best effort: failures are logged and never raised, so
    the booking or message that triggered them still goes through.
    """

    def __init__(self, repo: NotificationRepository):
        self.repo = repo

    def create_notification(self, data: NotificationCreate) -> bool:
        row = NotificationRow(
            **data.model_dump(),
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.repo.insert(row.model_dump(mode="json"))
        except Exception as e:
            logger.error("Error creating notification: %s", e)
            return False
        return True

    def create_booking_notification(
        self,
        provider_user_id: str,
        customer_id: str,
        booking: BookingInfo,
    ) -> None:
        """Notify the provider of a new request and confirm it to the customer."""
        self.create_notification(
            NotificationCreate(
                user_id=provider_user_id,
                title="📅 New Booking Request",
                message=(
                    f"{booking.customer_name} has requested a booking for "
                    f"{booking.scheduled_date} at {booking.scheduled_time}"
                ),
                type="info",
                link="/provider/bookings",
            )
        )
        self.create_notification(
            NotificationCreate(
                user_id=customer_id,
                title="✅ Booking Request Sent",
                message=(
                    "Your booking request has been sent. "
                    "The provider will respond within 24 hours."
                ),
                type="success",
                link="/bookings",
            )
        )

    def sender_name(self, sender_id: str) -> str:
        profile = self.repo.get_profile(sender_id) or {}
        metadata = profile.get("user_metadata") or {}
        return (
            profile.get("display_name")
            or metadata.get("name")
            or metadata.get("business_name")
            or "User"
        )

    def create_message_notification(
        self,
        receiver_id: str,
        sender_id: str,
        message: str,
    ) -> None:
        try:
            name = self.sender_name(sender_id)
        except Exception as e:
            logger.error("Error creating message notification: %s", e)
            return
        self.create_notification(
            NotificationCreate(
                user_id=receiver_id,
                title="💬 New Message",
                message=f"{name}: {message_preview(message)}",
                type="info",
                link="/messages",
            )
        )
