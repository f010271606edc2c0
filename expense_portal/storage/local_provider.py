"""
Local filesystem storage provider.
Each provider owns exactly one directory; uploads get a generated, collision-free name.
"""
import os
import random
import time
from typing import Optional, BinaryIO
from pathlib import Path

import structlog

from ..schemas.files import StoredFile
from .provider import StorageProvider, UploadTooLarge

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


def generate_filename(original_name: str, field_name: str = "file") -> str:
    """<field>-<epoch ms>-<random up to 1e9><original extension>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{field_name}-{unique_suffix}{os.path.splitext(original_name or '')[1]}"


class LocalStorageProvider(StorageProvider):
    """Stores files flat inside base_dir."""

    def __init__(self, base_dir: str | Path, field_name: str = "file"):
        self.base_dir = Path(base_dir)
        self.field_name = field_name
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, filename: str) -> Optional[Path]:
        # Only bare names resolve; anything carrying a directory component is treated as absent
        clean = Path(filename.replace("\\", "/")).name
        if not clean or clean != filename or clean in (".", ".."):
            return None
        return self.base_dir / clean

    def save(self, stream: BinaryIO, original_name: str, max_bytes: Optional[int] = None) -> StoredFile:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        while True:
            filename = generate_filename(original_name, self.field_name)
            path = self.base_dir / filename
            try:
                out = open(path, "xb")
            except FileExistsError:
                logger.info("upload_name_collision", filename=filename)
                continue
            break

        size = 0
        try:
            with out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if max_bytes is not None and size > max_bytes:
                        raise UploadTooLarge(max_bytes)
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.info("file_stored", directory=str(self.base_dir), filename=filename, size=size)
        return StoredFile(filename=filename, originalname=original_name, size=size)

    def path_for(self, filename: str) -> Optional[Path]:
        path = self._get_path(filename)
        if path is not None and path.is_file():
            return path
        return None

    def exists(self, filename: str) -> bool:
        return self.path_for(filename) is not None

    def delete(self, filename: str) -> bool:
        path = self.path_for(filename)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            # Lost a race with another delete
            return False
        logger.info("file_deleted", directory=str(self.base_dir), filename=filename)
        return True

