from pathlib import Path
from typing import BinaryIO, Optional

from ..schemas.files import StoredFile


class UploadTooLarge(Exception):
    def __init__(self, limit: int):
        super().__init__(f"File exceeds the {limit} byte limit")
        self.limit = limit


class StorageProvider:
    def save(self, stream: BinaryIO, original_name: str, max_bytes: Optional[int] = None) -> StoredFile:
        raise NotImplementedError

    def path_for(self, filename: str) -> Optional[Path]:
        raise NotImplementedError

    def exists(self, filename: str) -> bool:
        raise NotImplementedError

    def delete(self, filename: str) -> bool:
        """Remove the file; False when there was nothing to remove."""
        raise NotImplementedError
