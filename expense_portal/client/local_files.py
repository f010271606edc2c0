"""
In-memory file store for working without an upload server.

Content is held as a base64 data URL and handed out as ``localfile://`` links,
so nothing here survives the process.
"""
import base64
import random
import string
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

import structlog
from pydantic import BaseModel

logger = structlog.get_logger(__name__)

LOCAL_URL_SCHEME = "localfile://"
_ID_ALPHABET = string.ascii_lowercase + string.digits


class LocalFileReference(BaseModel):
    id: str
    name: str
    size: int
    type: str
    timestamp: datetime
    content: str


def _new_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"local_{int(time.time() * 1000)}_{suffix}"


def to_data_url(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


def from_data_url(data_url: str) -> Tuple[bytes, str]:
    header, _, payload = data_url.partition(",")
    mime = header.split(":", 1)[1].split(";", 1)[0] if ":" in header else "application/octet-stream"
    return base64.b64decode(payload), mime


class LocalFileStore:
    def __init__(self) -> None:
        self._files: Dict[str, LocalFileReference] = {}

    def save(self, name: str, content: bytes, content_type: str = "application/octet-stream") -> LocalFileReference:
        ref = LocalFileReference(
            id=_new_id(),
            name=name,
            size=len(content),
            type=content_type,
            timestamp=datetime.now(timezone.utc),
            content=to_data_url(content, content_type),
        )
        self._files[ref.id] = ref
        logger.info("local_file_saved", file_id=ref.id, name=name, size=ref.size)
        return ref

    def get(self, file_id: str) -> Optional[LocalFileReference]:
        return self._files.get(file_id)

    def list(self) -> List[LocalFileReference]:
        return list(self._files.values())

    def delete(self, file_id: str) -> bool:
        return self._files.pop(file_id, None) is not None

    @staticmethod
    def create_download_url(ref: LocalFileReference) -> str:
        return f"{LOCAL_URL_SCHEME}{ref.id}/{quote(ref.name, safe='')}"

    def read(self, file_id: str) -> Tuple[bytes, str]:
        """Decoded content and mime type; KeyError when the id is unknown."""
        ref = self._files.get(file_id)
        if ref is None:
            raise KeyError(file_id)
        return from_data_url(ref.content)

    def resolve(self, url: str) -> Tuple[str, bytes, str]:
        """Turn a ``localfile://`` link back into (file name, content, mime type)."""
        if not url.startswith(LOCAL_URL_SCHEME):
            raise ValueError(f"Not a local file URL: {url}")
        file_id = url[len(LOCAL_URL_SCHEME):].split("/", 1)[0]
        ref = self._files.get(file_id)
        if ref is None:
            raise KeyError(file_id)
        content, mime = from_data_url(ref.content)
        return ref.name, content, mime

    def mock_upload(self, name: str, content: bytes, content_type: str = "application/octet-stream") -> str:
        """Stand-in for a real upload: store locally and return the download link."""
        ref = self.save(name, content, content_type)
        return self.create_download_url(ref)
