from typing import Optional

from pydantic import BaseModel


class BroadcastNotificationRequest(BaseModel):

    title: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    itemId: Optional[str] = None
    createdBy: Optional[str] = None
