from pydantic import BaseModel
from typing import List
from mydeal.models.notifications import AppNotification


class NotificationListResponse(BaseModel):
    notifications: List[AppNotification]
    unread: int


class ClearNotificationsResponse(BaseModel):
    status: str
    removed: int
