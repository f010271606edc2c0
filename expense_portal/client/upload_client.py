"""
Client for the file upload server.

Posts attachments, keeps a local metadata record per upload and fetches files
back. Every call gives up after ``timeout`` seconds; nothing is retried.
"""
import mimetypes
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional, Union
from urllib.parse import urlparse

import httpx
import structlog
from slugify import slugify

from ..config import settings
from ..schemas.files import FileMetadata, SavedFile, UploadResponse
from .metadata_store import FileMetadataStore

logger = structlog.get_logger(__name__)

FileInput = Union[str, Path, bytes, BinaryIO]


class FileServiceError(Exception):
    pass


class UploadServerUnreachable(FileServiceError):
    """Connection refused or timed out; the message already says what to do."""


def _read_input(file: FileInput, file_name: Optional[str]) -> tuple[str, bytes]:
    if isinstance(file, (str, Path)):
        path = Path(file)
        return file_name or path.name, path.read_bytes()
    if isinstance(file, bytes):
        if not file_name:
            raise ValueError("file_name is required when uploading raw bytes")
        return file_name, file
    name = file_name or os.path.basename(getattr(file, "name", "") or "") or "upload"
    return name, file.read()


def safe_download_name(name: str) -> str:
    stem, ext = os.path.splitext(name)
    return f"{slugify(stem) or 'download'}{ext.lower()}"


class UploadClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        metadata: Optional[FileMetadataStore] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.upload_server_url).rstrip("/")
        self.metadata = metadata or FileMetadataStore(settings.file_metadata_path)
        self.timeout = timeout if timeout is not None else settings.upload_timeout_s
        self._http = http_client or httpx.Client(timeout=self.timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def _port(self) -> str:
        parsed = urlparse(self.base_url)
        return str(parsed.port or (443 if parsed.scheme == "https" else 80))

    def _connection_error(self) -> UploadServerUnreachable:
        return UploadServerUnreachable(
            f"Failed to connect to file upload server. Please ensure the server is running on port {self._port}."
        )

    def save_message_file(self, file: FileInput, file_name: Optional[str] = None, content_type: Optional[str] = None) -> SavedFile:
        """Admin attachment for a message."""
        return self._save(file, "admin-upload", file_name, content_type)

    def save_expense_file(self, file: FileInput, file_name: Optional[str] = None, content_type: Optional[str] = None) -> SavedFile:
        """Receipt or other attachment for an expense."""
        return self._save(file, "upload", file_name, content_type)

    def _save(self, file: FileInput, route: str, file_name: Optional[str], content_type: Optional[str]) -> SavedFile:
        try:
            name, content = _read_input(file, file_name)
            content_type = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"
            upload_url = f"{self.base_url}/{route}"
            logger.info("upload_started", url=upload_url, file_name=name, size=len(content))

            try:
                response = self._http.post(
                    upload_url,
                    files={"file": (name, content, content_type)},
                    timeout=self.timeout,
                )
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                logger.error("upload_unreachable", url=upload_url, error=str(e))
                raise self._connection_error() from e

            if response.is_error:
                logger.error("upload_rejected", url=upload_url, status=response.status_code, body=response.text)
                raise FileServiceError(
                    f"Failed to upload file to server: {response.status_code} {response.reason_phrase} - {response.text}"
                )

            result = UploadResponse.model_validate(response.json())
            file_id = str(uuid.uuid4())
            self.metadata.add(
                FileMetadata(
                    id=file_id,
                    original_name=name,
                    stored_name=result.file.filename,
                    path=result.file.path,
                    size=len(content),
                    type=content_type,
                    upload_date=datetime.now(timezone.utc),
                )
            )
            logger.info("upload_succeeded", file_id=file_id, stored_name=result.file.filename)
            return SavedFile(url=result.file.url, file_name=name, file_id=file_id)
        except FileServiceError:
            raise
        except Exception as e:
            logger.error("upload_failed", error=str(e))
            raise FileServiceError(f"Failed to save message file: {e}") from e

    def get_file_metadata(self, file_id: str) -> Optional[FileMetadata]:
        return self.metadata.get(file_id)

    def get_all_file_metadata(self) -> List[FileMetadata]:
        return self.metadata.all()

    def delete_file_metadata(self, file_id: str) -> bool:
        """Forget the local record only; the server copy stays until delete_remote_file."""
        return self.metadata.remove(file_id)

    def clear_all_file_metadata(self) -> None:
        self.metadata.clear()

    def delete_remote_file(self, stored_name: str) -> bool:
        """False when the server no longer has the file."""
        try:
            response = self._http.delete(f"{self.base_url}/file/{stored_name}", timeout=self.timeout)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            raise self._connection_error() from e
        if response.status_code == 404:
            return False
        if response.is_error:
            raise FileServiceError(f"Failed to delete file: {response.status_code} {response.reason_phrase}")
        return True

    def download_file(self, file_id: str, destination: str | Path, file_name: Optional[str] = None) -> Path:
        """Fetch a recorded upload into ``destination`` and return the written path."""
        try:
            meta = self.metadata.get(file_id)
            if meta is None:
                raise FileServiceError("File not found")
            try:
                response = self._http.get(f"{self.base_url}{meta.path}", timeout=self.timeout)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                raise self._connection_error() from e
            if response.is_error:
                raise FileServiceError(f"Failed to fetch file: {response.status_code} {response.reason_phrase}")

            target_dir = Path(destination)
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / safe_download_name(file_name or meta.original_name)
            target.write_bytes(response.content)
            logger.info("file_downloaded", file_id=file_id, target=str(target))
            return target
        except UploadServerUnreachable:
            raise
        except FileServiceError as e:
            raise FileServiceError(f"Failed to download file: {e}") from e
        except OSError as e:
            raise FileServiceError(f"Failed to download file: {e}") from e
