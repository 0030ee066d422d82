from typing import Optional

from pydantic import BaseModel, ConfigDict


class SendMessageRequest(BaseModel):

    # presence is checked by the service so a missing field is a 400, not a 422
    model_config = ConfigDict(extra="ignore")

    senderId: Optional[str] = None
    receiverId: Optional[str] = None
    senderRole: Optional[str] = None
    receiverRole: Optional[str] = None
    content: Optional[str] = None


class ConversationPartner(BaseModel):

    uid: str
    name: str
    role: Optional[str] = None
    photoURL: Optional[str] = None
