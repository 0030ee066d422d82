from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import pytest
from bson import ObjectId
from gridfs.errors import NoFile
from mongomock_motor import AsyncMongoMockClient

from alumni_network.config import Settings
from alumni_network.database.connection import MongoStore
from alumni_network.main import create_app
from alumni_network.utils.security import create_access_token


class _MemoryGridOut:

    def __init__(self, data: bytes, chunk_size: int) -> None:
        self._data = data
        self._chunk_size = chunk_size
        self._pos = 0

    async def readchunk(self) -> bytes:
        chunk = self._data[self._pos:self._pos + self._chunk_size]
        self._pos += len(chunk)
        return chunk


class MemoryBucket:
    """Stand-in for AsyncIOMotorGridFSBucket: file documents go into the
    mock database's ``<bucket>.files`` collection, contents stay in memory."""

    def __init__(self, db, bucket_name: str, chunk_size: int = 4) -> None:
        self._files = db[f"{bucket_name}.files"]
        self._chunk_size = chunk_size
        self.blobs: Dict[Any, bytes] = {}

    async def upload_from_stream(self, filename: str, source, metadata: Optional[dict] = None):
        data = source.read() if hasattr(source, "read") else bytes(source)
        file_id = ObjectId()
        await self._files.insert_one({
            "_id": file_id,
            "filename": filename,
            "length": len(data),
            "chunkSize": self._chunk_size,
            "uploadDate": datetime.now(timezone.utc),
            "metadata": metadata,
        })
        self.blobs[file_id] = data
        return file_id

    async def open_download_stream_by_name(self, filename: str):
        doc = await self._files.find_one({"filename": filename})
        if doc is None:
            raise NoFile(filename)
        return _MemoryGridOut(self.blobs[doc["_id"]], self._chunk_size)

    async def delete(self, file_id) -> None:
        result = await self._files.delete_one({"_id": file_id})
        if not result.deleted_count:
            raise NoFile(file_id)
        self.blobs.pop(file_id, None)


class RecordingPush:

    enabled = True

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: List[dict] = []

    async def send(self, token, title, body, data=None) -> None:
        if self.fail:
            raise RuntimeError("push backend unavailable")
        self.sent.append({"token": token, "title": title, "body": body, "data": data})


ID_TOKENS = {"valid-token-alice": "firebase-alice", "valid-token-ghost": "firebase-ghost"}


def fake_verify_id_token(id_token: str) -> dict:
    if id_token not in ID_TOKENS:
        raise ValueError("Invalid ID token")
    return {"uid": ID_TOKENS[id_token]}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_database="alumni-test",
        jwt_secret="test-secret",
        max_upload_bytes=64,
        log_level="WARNING",
    )


@pytest.fixture
def store(settings) -> MongoStore:
    return MongoStore(
        settings,
        client=AsyncMongoMockClient(),
        bucket_factory=lambda db, name: MemoryBucket(db, name),
    )


@pytest.fixture
def db(store):
    return store.db


@pytest.fixture
def push() -> RecordingPush:
    return RecordingPush()


@pytest.fixture
def app(settings, store, push):
    return create_app(settings, store=store, verify_id_token=fake_verify_id_token, push=push)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers(settings):
    def _headers(user_id: str, role: str = "student") -> dict:
        token = create_access_token({"id": user_id, "role": role}, settings.jwt_secret)
        return {"Authorization": f"Bearer {token}"}

    return _headers


def message_payload(sender: str, receiver: str, content: str, sender_role: str = "student", receiver_role: str = "alumni") -> dict:
    return {
        "senderId": sender,
        "receiverId": receiver,
        "senderRole": sender_role,
        "receiverRole": receiver_role,
        "content": content,
    }
