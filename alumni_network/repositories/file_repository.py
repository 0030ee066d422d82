from typing import Any, AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from alumni_network.models.stored_file import StoredFileDocument, StoredFileMetadata


class FileRepository:
    """GridFS-backed storage for uploaded files, addressed by filename."""

    def __init__(self, db: AsyncIOMotorDatabase, bucket, bucket_name: str) -> None:
        self._db = db
        self._bucket = bucket
        self._bucket_name = bucket_name

    @property
    def files(self):
        return self._db[f"{self._bucket_name}.files"]

    async def save(self, filename: str, source: Any, metadata: StoredFileMetadata) -> str:
        file_id = await self._bucket.upload_from_stream(filename, source, metadata=metadata)
        return str(file_id)

    async def find_by_filename(self, filename: str) -> Optional[StoredFileDocument]:
        return await self.files.find_one({"filename": filename})

    async def iter_chunks(self, filename: str) -> AsyncIterator[bytes]:
        grid_out = await self._bucket.open_download_stream_by_name(filename)
        while True:
            chunk = await grid_out.readchunk()
            if not chunk:
                break
            yield chunk

    async def delete(self, file_id) -> None:
        await self._bucket.delete(file_id)
