from fastapi import APIRouter, Depends, status
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from app.core.auth import require_auth
from app.models.session import AuthSession
from app.routers.deps import get_notification_service
from app.schemas.notification import BookingInfo
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


class BookingNotificationRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    provider_user_id: str
    booking: BookingInfo


class MessageNotificationRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    receiver_id: str
    message: str = Field(min_length=1)


@router.post("/booking", status_code=status.HTTP_202_ACCEPTED)
def notify_booking(
    payload: BookingNotificationRequest,
    user: AuthSession = Depends(require_auth),
    service: NotificationService = Depends(get_notification_service),
):
    """
    Notify a provider of the caller's booking request and confirm it to
    the caller. Fire and forget.
    """
    service.create_booking_notification(
        payload.provider_user_id, user.user_id, payload.booking
    )
    return {"accepted": True}


@router.post("/message", status_code=status.HTTP_202_ACCEPTED)
def notify_message(
    payload: MessageNotificationRequest,
    user: AuthSession = Depends(require_auth),
    service: NotificationService = Depends(get_notification_service),
):
    """Tell the receiver they have a new message from the caller."""
    service.create_message_notification(payload.receiver_id, user.user_id, payload.message)
    return {"accepted": True}
