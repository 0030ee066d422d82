from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from alumni_network.models.notification import NotificationDocument


class NotificationRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["notifications"]

    @staticmethod
    def _normalize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def create(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        item_id: str,
        created_by: str,
    ) -> NotificationDocument:
        doc: NotificationDocument = {
            "userId": user_id,
            "title": title,
            "message": message,
            "type": type,
            "itemId": item_id,
            "createdBy": created_by,
            "read": False,
            "createdAt": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def list_for_user(self, user_id: str, limit: int = 50, skip: int = 0) -> List[NotificationDocument]:
        cur = (
            self.collection.find({"userId": user_id})
            .sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            .skip(skip)
            .limit(limit)
        )
        return [self._normalize(it) for it in await cur.to_list(length=limit)]

    async def count_unread(self, user_id: str) -> int:
        return await self.collection.count_documents({"userId": user_id, "read": False})

    async def mark_read(self, notification_id: str, user_id: str) -> Optional[NotificationDocument]:
        if not ObjectId.is_valid(notification_id):
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": ObjectId(notification_id), "userId": user_id},
            {"$set": {"read": True}},
            return_document=ReturnDocument.AFTER,
        )
        return self._normalize(doc)

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.collection.update_many(
            {"userId": user_id, "read": False},
            {"$set": {"read": True}},
        )
        return result.modified_count or 0

    async def delete(self, notification_id: str, user_id: str) -> Optional[NotificationDocument]:
        if not ObjectId.is_valid(notification_id):
            return None
        # scoped to the owner so a foreign id reads as not found
        doc = await self.collection.find_one_and_delete({"_id": ObjectId(notification_id), "userId": user_id})
        return self._normalize(doc)

    async def delete_all_for_user(self, user_id: str) -> int:
        result = await self.collection.delete_many({"userId": user_id})
        return result.deleted_count or 0
