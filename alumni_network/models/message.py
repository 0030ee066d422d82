from datetime import datetime
from typing import Literal, TypedDict


UserRole = Literal["student", "teacher", "alumni"]

USER_ROLES = ("student", "teacher", "alumni")


class MessageDocument(TypedDict, total=False):
    _id: str
    senderId: str
    receiverId: str
    senderRole: UserRole
    receiverRole: UserRole
    content: str
    # flips false -> true only
    read: bool
    createdAt: datetime
