import logging
from typing import Any, Dict, List, Optional

from alumni_network.models.notification import NOTIFICATION_TYPES
from alumni_network.repositories.notification_repository import NotificationRepository
from alumni_network.repositories.user_repository import UserRepository
from alumni_network.utils.notifications import NoopPush


logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, notification_repo: NotificationRepository, user_repo: UserRepository, push=None) -> None:
        self._notification_repo = notification_repo
        self._user_repo = user_repo
        self._push = push or NoopPush()

    async def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        item_id: str,
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not all((user_id, title, message, type, item_id)):
            raise ValueError("Missing required fields for notification")
        if type not in NOTIFICATION_TYPES:
            raise ValueError(f"Invalid notification type: {type}")

        notification = await self._notification_repo.create(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            item_id=item_id,
            created_by=created_by or "system",
        )
        logger.info("Notification %s saved for user %s", notification["_id"], user_id)

        if getattr(self._push, "enabled", False):
            try:
                user = await self._user_repo.get_by_id(user_id)
                if user and user.get("fcmToken"):
                    await self._push.send(user["fcmToken"], title, message, {"type": type, "itemId": item_id})
            except Exception:
                # the stored notification stands even when push delivery fails
                logger.exception("Push notification to user %s failed", user_id)

        return notification

    async def _fan_out(self, users: List[dict], title: str, message: str, type: str, item_id: str, created_by: Optional[str]) -> List[Dict[str, Any]]:
        notifications = []
        failed = 0
        for user in users:
            try:
                notifications.append(
                    await self.create_notification(user["_id"], title, message, type, item_id, created_by)
                )
            except Exception:
                logger.warning("Notification for user %s failed", user.get("_id"), exc_info=True)
                failed += 1
        logger.info("Notification fan-out: %d succeeded, %d failed", len(notifications), failed)
        return notifications

    async def notify_users_by_role(
        self, role: str, title: str, message: str, type: str, item_id: str, created_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        try:
            users = await self._user_repo.list_by_role(role)
        except Exception:
            logger.exception("Could not list users with role %s", role)
            return []
        return await self._fan_out(users, title, message, type, item_id, created_by)

    async def notify_all_users(
        self, title: str, message: str, type: str, item_id: str, created_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        try:
            users = await self._user_repo.list_all()
        except Exception:
            logger.exception("Could not list users")
            return []
        return await self._fan_out(users, title, message, type, item_id, created_by)

    async def get_user_notifications(self, user_id: str, limit: int = 50, skip: int = 0) -> List[Dict[str, Any]]:
        return await self._notification_repo.list_for_user(user_id, limit=limit, skip=skip)

    async def get_unread_count(self, user_id: str) -> int:
        return await self._notification_repo.count_unread(user_id)

    async def mark_as_read(self, notification_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        return await self._notification_repo.mark_read(notification_id, user_id)

    async def mark_all_as_read(self, user_id: str) -> int:
        return await self._notification_repo.mark_all_read(user_id)

    async def delete_notification(self, notification_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        return await self._notification_repo.delete(notification_id, user_id)

    async def delete_all_for_user(self, user_id: str) -> int:
        return await self._notification_repo.delete_all_for_user(user_id)
