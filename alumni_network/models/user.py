from typing import Optional, TypedDict

from alumni_network.models.message import UserRole


class UserDocument(TypedDict, total=False):

    _id: str
    firebaseUID: str
    name: Optional[str]
    email: Optional[str]
    role: UserRole
    photoURL: Optional[str]
    # device token for push delivery
    fcmToken: Optional[str]
