from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from alumni_network.models.user import UserDocument


class UserRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("users")

    @staticmethod
    def _normalize(user: Optional[dict]) -> Optional[dict]:
        if user:
            user["_id"] = str(user["_id"])  # normalize to string for API layer
        return user

    async def get_by_firebase_uid(self, firebase_uid: str) -> Optional[UserDocument]:

        user = await self._collection.find_one({"firebaseUID": firebase_uid})
        return self._normalize(user)

    async def get_by_id(self, user_id: str) -> Optional[UserDocument]:

        if not ObjectId.is_valid(user_id):
            return None
        user = await self._collection.find_one({"_id": ObjectId(user_id)})
        return self._normalize(user)

    async def get_profiles(self, uids: Iterable[str]) -> Dict[str, UserDocument]:
        """Map each known uid (Firebase uid or stored id) to its user record."""
        uids = list(uids)
        if not uids:
            return {}
        oids = [ObjectId(u) for u in uids if ObjectId.is_valid(u)]
        query: Dict[str, Any] = {"$or": [{"firebaseUID": {"$in": uids}}, {"_id": {"$in": oids}}]}
        cur = self._collection.find(query)
        profiles: Dict[str, UserDocument] = {}
        for user in await cur.to_list(length=None):
            self._normalize(user)
            if user.get("firebaseUID") in uids:
                profiles[user["firebaseUID"]] = user
            if user["_id"] in uids:
                profiles[user["_id"]] = user
        return profiles

    async def list_by_role(self, role: str) -> List[UserDocument]:

        cur = self._collection.find({"role": role})
        return [self._normalize(u) for u in await cur.to_list(length=None)]

    async def list_all(self) -> List[UserDocument]:

        cur = self._collection.find({})
        return [self._normalize(u) for u in await cur.to_list(length=None)]
