from pathlib import Path
from typing import Optional, BinaryIO

from ..schemas.files import StoredFile
from .provider import StorageProvider


class FallbackStorageProvider(StorageProvider):
    """Writes go to primary; lookups and deletes try primary, then fallback."""

    def __init__(self, primary: StorageProvider, fallback: StorageProvider):
        self.primary = primary
        self.fallback = fallback

    def save(self, stream: BinaryIO, original_name: str, max_bytes: Optional[int] = None) -> StoredFile:
        return self.primary.save(stream, original_name, max_bytes)

    def path_for(self, filename: str) -> Optional[Path]:
        return self.primary.path_for(filename) or self.fallback.path_for(filename)

    def exists(self, filename: str) -> bool:
        return self.primary.exists(filename) or self.fallback.exists(filename)

    def delete(self, filename: str) -> bool:
        if self.primary.delete(filename):
            return True
        return self.fallback.delete(filename)
