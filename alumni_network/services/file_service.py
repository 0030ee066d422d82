import logging
import os
import secrets
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional, Tuple

from alumni_network.repositories.file_repository import FileRepository
from alumni_network.utils.errors import ApiError


logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({
    # documents
    ".pdf", ".doc", ".docx", ".ppt", ".pptx", ".xls", ".xlsx", ".txt",
    # images
    ".jpg", ".jpeg", ".png", ".gif",
    # video
    ".mp4", ".mov", ".avi", ".webm",
    # audio
    ".mp3", ".wav",
    # archives
    ".zip", ".rar",
})


def random_filename(original_name: str) -> str:
    # 128 random bits; collisions are not checked
    return secrets.token_hex(16) + os.path.splitext(original_name)[1]


class FileService:

    def __init__(self, file_repo: FileRepository, max_upload_bytes: int) -> None:
        self._file_repo = file_repo
        self._max_upload_bytes = max_upload_bytes

    def check_upload(self, original_name: str, size: Optional[int]) -> None:
        ext = os.path.splitext(original_name or "")[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ApiError(
                400,
                "Invalid file type. Only documents, images, videos, audio, and archive files are allowed.",
            )
        if size is not None and size > self._max_upload_bytes:
            raise ApiError(413, f"File too large. Maximum size is {self._max_upload_bytes} bytes.")

    async def upload(
        self,
        source: Any,
        original_name: str,
        mimetype: Optional[str],
        size: Optional[int],
        uploaded_by: Optional[str],
    ) -> Dict[str, Any]:
        self.check_upload(original_name, size)
        filename = random_filename(original_name)
        metadata = {
            "originalname": original_name,
            "mimetype": mimetype or "application/octet-stream",
            "size": size,
            "uploadedBy": uploaded_by or "unknown",
            "uploadDate": datetime.now(timezone.utc),
        }
        await self._file_repo.save(filename, source, metadata)
        logger.info("Stored %s as %s (%s bytes)", original_name, filename, size)
        return {
            "filename": filename,
            "originalname": original_name,
            "mimetype": metadata["mimetype"],
            "size": size,
        }

    async def open(self, filename: str) -> Optional[Tuple[Dict[str, Any], AsyncIterator[bytes]]]:
        file_doc = await self._file_repo.find_by_filename(filename)
        if file_doc is None:
            return None
        return file_doc, self._file_repo.iter_chunks(filename)

    async def delete(self, filename: str) -> bool:
        file_doc = await self._file_repo.find_by_filename(filename)
        if file_doc is None:
            return False
        await self._file_repo.delete(file_doc["_id"])
        logger.info("Deleted file %s", filename)
        return True
