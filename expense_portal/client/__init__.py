from .local_files import LocalFileStore
from .metadata_store import FileMetadataStore
from .upload_client import FileServiceError, UploadClient, UploadServerUnreachable

__all__ = ["FileMetadataStore", "FileServiceError", "LocalFileStore", "UploadClient", "UploadServerUnreachable"]
