import logging
from typing import Any, Callable, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket

from alumni_network.config import Settings


logger = logging.getLogger(__name__)

BucketFactory = Callable[[AsyncIOMotorDatabase, str], Any]


def _gridfs_bucket(db: AsyncIOMotorDatabase, name: str) -> AsyncIOMotorGridFSBucket:
    return AsyncIOMotorGridFSBucket(db, bucket_name=name)


class MongoStore:
    """Owns the Mongo client and hands out the database and GridFS buckets.

    Built once by the application factory and passed down through
    ``app.state``. A pre-built client can be injected (tests use
    ``mongomock_motor``), in which case ``connect`` keeps it.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[Any] = None,
        bucket_factory: Optional[BucketFactory] = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._bucket_factory = bucket_factory or _gridfs_bucket
        self._buckets: dict = {}

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("MongoStore is not connected")
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self.client[self._settings.mongo_database]

    def bucket(self, name: Optional[str] = None):
        name = name or self._settings.uploads_bucket
        if name not in self._buckets:
            self._buckets[name] = self._bucket_factory(self.db, name)
        return self._buckets[name]

    def connect(self) -> None:
        if self._client is not None:
            return
        self._client = AsyncIOMotorClient(self._settings.mongo_uri)
        logger.info("Connected to MongoDB database %s", self._settings.mongo_database)

    def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None
        self._buckets = {}
        logger.info("MongoDB connection closed")


def get_store(request: Request) -> MongoStore:
    return request.app.state.store


def mongo_db_dependency(request: Request) -> AsyncIOMotorDatabase:
    return get_store(request).db


def uploads_bucket_dependency(request: Request):
    return get_store(request).bucket()
