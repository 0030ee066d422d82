import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from alumni_network.config import Settings
from alumni_network.database.connection import mongo_db_dependency, uploads_bucket_dependency
from alumni_network.repositories.file_repository import FileRepository
from alumni_network.schemas.user import SessionUser
from alumni_network.services.file_service import FileService
from alumni_network.utils.dependencies import get_current_user, get_settings
from alumni_network.utils.errors import error_response, server_error


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])


def content_disposition(name: str) -> str:
    # header values are latin-1; anything else goes through RFC 5987 encoding
    quoted = quote(name)
    if quoted != name:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{name}"'


def get_file_service(
    db = Depends(mongo_db_dependency),
    bucket = Depends(uploads_bucket_dependency),
    settings: Settings = Depends(get_settings),
) -> FileService:
    return FileService(FileRepository(db, bucket, settings.uploads_bucket), settings.max_upload_bytes)


@router.post("/upload", status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    current_user: SessionUser = Depends(get_current_user),
    service: FileService = Depends(get_file_service),
):
    # size and extension problems raise ApiError and bypass the catch-all
    service.check_upload(file.filename, file.size)
    try:
        stored = await service.upload(
            file.file,
            original_name=file.filename,
            mimetype=file.content_type,
            size=file.size,
            uploaded_by=current_user.id,
        )
    except Exception as exc:
        logger.exception("Error uploading %s", file.filename)
        return server_error("Error uploading file", exc)
    return {"success": True, "file": stored}


@router.get("/{filename}")
async def get_file(filename: str, service: FileService = Depends(get_file_service)):
    try:
        found = await service.open(filename)
    except Exception as exc:
        logger.exception("Error serving file %s", filename)
        return server_error("Error serving file", exc)
    if found is None:
        logger.warning("File not found: %s", filename)
        return error_response(404, "File not found")

    file_doc, chunks = found
    metadata = file_doc.get("metadata") or {}
    return StreamingResponse(
        chunks,
        media_type=metadata.get("mimetype") or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(metadata.get("originalname") or filename)},
    )


@router.delete("/{filename}")
async def delete_file(filename: str, current_user: SessionUser = Depends(get_current_user), service: FileService = Depends(get_file_service)):
    try:
        deleted = await service.delete(filename)
    except Exception as exc:
        logger.exception("Error deleting file %s", filename)
        return server_error("Error deleting file", exc)
    if not deleted:
        return error_response(404, "File not found")
    return {"success": True, "message": "File deleted successfully"}
