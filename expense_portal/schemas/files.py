from datetime import datetime
from pydantic import BaseModel

from .common import CamelModel


class StoredFile(BaseModel):
    filename: str
    originalname: str
    size: int


class UploadedFile(StoredFile):
    path: str
    url: str


class UploadResponse(BaseModel):
    message: str
    file: UploadedFile


class FileMetadata(CamelModel):
    id: str
    original_name: str
    stored_name: str
    path: str
    size: int
    type: str
    upload_date: datetime


class SavedFile(BaseModel):
    url: str
    file_name: str
    file_id: str
