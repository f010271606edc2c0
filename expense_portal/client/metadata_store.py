"""
Client-side record of uploaded files.

Stands in for the browser's local storage: a single JSON list on disk. It is a
convenience index only and can drift from what the upload server holds.
"""
import json
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from ..schemas.files import FileMetadata

logger = structlog.get_logger(__name__)


class FileMetadataStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> List[FileMetadata]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [FileMetadata.model_validate(item) for item in raw]
        except (OSError, ValueError, ValidationError) as e:
            logger.error("file_metadata_read_failed", path=str(self.path), error=str(e))
            return []

    def _save(self, items: List[FileMetadata]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [item.model_dump(mode="json", by_alias=True) for item in items]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def add(self, metadata: FileMetadata) -> None:
        items = self._load()
        items.append(metadata)
        try:
            self._save(items)
        except OSError as e:
            logger.error("file_metadata_write_failed", path=str(self.path), error=str(e))

    def get(self, file_id: str) -> Optional[FileMetadata]:
        return next((m for m in self._load() if m.id == file_id), None)

    def all(self) -> List[FileMetadata]:
        return self._load()

    def remove(self, file_id: str) -> bool:
        try:
            self._save([m for m in self._load() if m.id != file_id])
        except OSError as e:
            logger.error("file_metadata_write_failed", path=str(self.path), error=str(e))
            return False
        return True

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
