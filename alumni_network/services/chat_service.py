import logging
from typing import Any, Dict, List, Optional

from alumni_network.models.message import USER_ROLES
from alumni_network.repositories.message_repository import MessageRepository
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.schemas.message import ConversationPartner


logger = logging.getLogger(__name__)

REQUIRED_MESSAGE_FIELDS = ("senderId", "receiverId", "senderRole", "receiverRole", "content")


def validate_message_payload(payload: Dict[str, Any]) -> None:
    if any(not payload.get(field) for field in REQUIRED_MESSAGE_FIELDS):
        raise ValueError("Missing required fields")
    for field in ("senderRole", "receiverRole"):
        if payload[field] not in USER_ROLES:
            raise ValueError(f"Invalid {field}: {payload[field]}")


def _partner_of(message: Dict[str, Any], user_id: str) -> str:
    return message["receiverId"] if message["senderId"] == user_id else message["senderId"]


class ChatService:

    def __init__(self, message_repo: MessageRepository, user_repo: Optional[UserRepository] = None) -> None:
        self._message_repo = message_repo
        self._user_repo = user_repo

    async def send_message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        validate_message_payload(payload)
        saved = await self._message_repo.save_message(
            sender_id=payload["senderId"],
            receiver_id=payload["receiverId"],
            sender_role=payload["senderRole"],
            receiver_role=payload["receiverRole"],
            content=payload["content"],
        )
        logger.info("Message %s saved from %s to %s", saved["_id"], saved["senderId"], saved["receiverId"])
        return saved

    async def get_history(self, user_id: str, partner_id: str) -> List[Dict[str, Any]]:
        return await self._message_repo.get_history(user_id, partner_id)

    async def mark_read(self, sender_id: str, receiver_id: str) -> int:
        modified = await self._message_repo.mark_read(sender_id, receiver_id)
        logger.info("Marked %d messages from %s to %s as read", modified, sender_id, receiver_id)
        return modified

    async def list_conversations(self, user_id: str) -> List[Dict[str, Any]]:
        """One entry per conversation partner, most recently active first.

        Each entry carries the newest message exchanged with the partner and
        the number of messages from the partner the user has not read yet.
        The whole message history of the user is scanned on every call.
        """
        messages = await self._message_repo.find_for_participant(user_id)

        latest: Dict[str, Dict[str, Any]] = {}
        unread: Dict[str, int] = {}
        # messages arrive newest first, so the first one seen per partner wins
        for message in messages:
            partner_id = _partner_of(message, user_id)
            if message["receiverId"] == user_id and not message.get("read"):
                unread[partner_id] = unread.get(partner_id, 0) + 1
            latest.setdefault(partner_id, message)

        profiles: Dict[str, Dict[str, Any]] = {}
        if self._user_repo is not None and latest:
            profiles = await self._user_repo.get_profiles(latest.keys())

        conversations = []
        for partner_id, last_message in latest.items():
            partner_role = (
                last_message.get("receiverRole")
                if last_message["senderId"] == user_id
                else last_message.get("senderRole")
            )
            profile = profiles.get(partner_id, {})
            partner = ConversationPartner(
                uid=partner_id,
                name=profile.get("name") or partner_id,
                role=partner_role,
                photoURL=profile.get("photoURL"),
            )
            conversations.append({
                "user": partner.model_dump(),
                "lastMessage": last_message,
                "unreadCount": unread.get(partner_id, 0),
            })

        conversations.sort(key=lambda c: c["lastMessage"]["createdAt"], reverse=True)
        logger.info("Returning %d conversations for %s", len(conversations), user_id)
        return conversations

    async def create_verified_message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        saved = await self.send_message(payload)
        fetched = await self._message_repo.get_by_id(saved["_id"])
        if fetched is None:
            raise RuntimeError("Message was saved but could not be retrieved")
        sender_recent = await self._message_repo.find_for_participant(saved["senderId"], limit=10)
        receiver_recent = await self._message_repo.find_for_participant(saved["receiverId"], limit=10)
        return {
            "savedMessage": fetched,
            "senderMessagesCount": len(sender_recent),
            "receiverMessagesCount": len(receiver_recent),
        }

    async def list_all_messages(self) -> List[Dict[str, Any]]:
        return await self._message_repo.list_all()

    async def clear_all_messages(self) -> int:
        deleted = await self._message_repo.delete_all()
        logger.info("Deleted %d messages", deleted)
        return deleted
