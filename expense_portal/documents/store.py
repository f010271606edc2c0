from typing import Any, List, Optional, Sequence, Tuple

# (field, value) pairs, combined with AND and compared for equality
Filters = Sequence[Tuple[str, Any]]


class DocumentStore:
    """Minimal Firestore-shaped document API.

    Documents are plain dicts; every dict handed back carries its ``id``.
    """

    def add(self, collection: str, data: dict) -> str:
        raise NotImplementedError

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        """Merge ``changes`` into an existing document; raises DocumentNotFoundError if absent."""
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> None:
        """Deleting a missing document is a no-op."""
        raise NotImplementedError

    def list(self, collection: str) -> List[dict]:
        return self.query(collection)

    def query(
        self,
        collection: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[dict]:
        raise NotImplementedError
