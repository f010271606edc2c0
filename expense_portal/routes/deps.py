from fastapi import Request

from ..config import Settings
from ..documents import DocumentStore
from ..storage.provider import StorageProvider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_upload_storages(request: Request) -> dict[str, StorageProvider]:
    """Directory name -> provider writing into it."""
    return request.app.state.upload_storages


def get_delete_storage(request: Request) -> StorageProvider:
    return request.app.state.delete_storage
