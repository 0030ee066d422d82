from datetime import datetime
from typing import TypedDict


class StoredFileMetadata(TypedDict, total=False):
    originalname: str
    mimetype: str
    size: int
    uploadedBy: str
    uploadDate: datetime


class StoredFileDocument(TypedDict, total=False):
    # GridFS "<bucket>.files" entry
    _id: str
    filename: str
    length: int
    uploadDate: datetime
    metadata: StoredFileMetadata
