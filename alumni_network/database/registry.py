"""Static registry of the collections the backend owns and their indexes.

Run ``alumni-update-indexes`` to create any missing index and log what each
collection ends up with.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from alumni_network.config import Settings
from alumni_network.database.connection import MongoStore
from alumni_network.utils.logging_config import configure_logging


logger = logging.getLogger(__name__)

IndexKeys = List[Tuple[str, int]]


@dataclass(frozen=True)
class IndexSpec:

    keys: IndexKeys
    unique: bool = False
    sparse: bool = False

    def options(self) -> Dict[str, Any]:
        opts: Dict[str, Any] = {}
        if self.unique:
            opts["unique"] = True
        if self.sparse:
            opts["sparse"] = True
        return opts


@dataclass(frozen=True)
class CollectionSpec:

    name: str
    indexes: Sequence[IndexSpec] = field(default_factory=tuple)


USERS = CollectionSpec(
    name="users",
    indexes=(
        IndexSpec([("firebaseUID", ASCENDING)], unique=True, sparse=True),
        IndexSpec([("role", ASCENDING)]),
    ),
)

MESSAGES = CollectionSpec(
    name="messages",
    indexes=(
        IndexSpec([("senderId", ASCENDING), ("receiverId", ASCENDING)]),
        IndexSpec([("receiverId", ASCENDING), ("senderId", ASCENDING)]),
        IndexSpec([("createdAt", DESCENDING)]),
    ),
)

NOTIFICATIONS = CollectionSpec(
    name="notifications",
    indexes=(
        IndexSpec([("userId", ASCENDING), ("createdAt", DESCENDING)]),
        IndexSpec([("userId", ASCENDING), ("read", ASCENDING)]),
    ),
)

UPLOADED_FILES = CollectionSpec(
    name="uploads.files",
    indexes=(
        IndexSpec([("filename", ASCENDING), ("uploadDate", ASCENDING)]),
    ),
)

COLLECTIONS: Tuple[CollectionSpec, ...] = (USERS, MESSAGES, NOTIFICATIONS, UPLOADED_FILES)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> Dict[str, List[str]]:
    created: Dict[str, List[str]] = {}
    for spec in COLLECTIONS:
        names = []
        for index in spec.indexes:
            name = await db[spec.name].create_index(index.keys, **index.options())
            names.append(name)
        created[spec.name] = names
    return created


async def describe_indexes(db: AsyncIOMotorDatabase) -> Dict[str, Dict[str, Any]]:
    info: Dict[str, Dict[str, Any]] = {}
    for spec in COLLECTIONS:
        info[spec.name] = await db[spec.name].index_information()
    return info


async def update_indexes(store: MongoStore) -> Dict[str, Dict[str, Any]]:
    await ensure_indexes(store.db)
    info = await describe_indexes(store.db)
    for collection, indexes in info.items():
        logger.info("%s: %d indexes", collection, len(indexes))
        for name, details in indexes.items():
            logger.info("  %s %s", name, details.get("key"))
    return info


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    store = MongoStore(settings)
    store.connect()
    try:
        asyncio.run(update_indexes(store))
    finally:
        store.close()


if __name__ == "__main__":
    main()
