from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from alumni_network.models.message import MessageDocument


class MessageRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["messages"]

    @staticmethod
    def _normalize(items: List[Dict[str, Any]]) -> List[MessageDocument]:
        for it in items:
            it["_id"] = str(it.get("_id"))
        return items

    async def save_message(
        self,
        sender_id: str,
        receiver_id: str,
        sender_role: str,
        receiver_role: str,
        content: str,
    ) -> MessageDocument:
        doc: MessageDocument = {
            "senderId": sender_id,
            "receiverId": receiver_id,
            "senderRole": sender_role,
            "receiverRole": receiver_role,
            "content": content,
            "read": False,
            "createdAt": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def get_by_id(self, message_id: str) -> Optional[MessageDocument]:
        if not ObjectId.is_valid(message_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(message_id)})
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def get_history(self, user_id: str, partner_id: str) -> List[MessageDocument]:
        query = {
            "$or": [
                {"senderId": user_id, "receiverId": partner_id},
                {"senderId": partner_id, "receiverId": user_id},
            ]
        }
        cur = self.collection.find(query).sort([("createdAt", ASCENDING), ("_id", ASCENDING)])
        return self._normalize(await cur.to_list(length=None))

    async def find_for_participant(self, user_id: str, limit: Optional[int] = None) -> List[MessageDocument]:
        """Every message the user sent or received, newest first."""
        query = {"$or": [{"senderId": user_id}, {"receiverId": user_id}]}
        cur = self.collection.find(query).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        if limit:
            cur = cur.limit(limit)
        return self._normalize(await cur.to_list(length=limit))

    async def mark_read(self, sender_id: str, receiver_id: str) -> int:
        result = await self.collection.update_many(
            {"senderId": sender_id, "receiverId": receiver_id, "read": False},
            {"$set": {"read": True}},
        )
        return result.modified_count or 0

    async def list_all(self) -> List[MessageDocument]:
        cur = self.collection.find({}).sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
        return self._normalize(await cur.to_list(length=None))

    async def delete_all(self) -> int:
        result = await self.collection.delete_many({})
        return result.deleted_count or 0
