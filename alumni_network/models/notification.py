from datetime import datetime
from typing import Literal, TypedDict


NotificationType = Literal["event", "job", "course", "mentorship", "announcement", "system"]

NOTIFICATION_TYPES = ("event", "job", "course", "mentorship", "announcement", "system")


class NotificationDocument(TypedDict, total=False):
    _id: str
    userId: str
    title: str
    message: str
    type: NotificationType
    itemId: str
    createdBy: str
    read: bool
    createdAt: datetime
