from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

NotificationType = Literal["info", "success", "warning", "error"]


class NotificationCreate(SQLModel):
    """
    In-app notification to insert into the `notifications` table.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: str
    title: str
    message: str
    type: NotificationType = "info"
    is_read: bool = False
    link: str | None = None


class BookingInfo(SQLModel):
    """Booking fields quoted in booking notifications."""

    model_config = ConfigDict(extra="ignore")

    customer_name: str
    scheduled_date: str
    scheduled_time: str


class NotificationRow(NotificationCreate):
    created_at: datetime
