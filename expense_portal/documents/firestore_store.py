"""
Firestore-backed document store.
Google API errors are translated into the DataAccessError family so callers never see google exceptions.
"""
from contextlib import contextmanager
from typing import List, Optional

import structlog
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .errors import (
    DataAccessError,
    DocumentNotFoundError,
    MissingIndexError,
    PermissionDeniedError,
    ServiceUnavailableError,
)
from .store import DocumentStore, Filters

logger = structlog.get_logger(__name__)


@contextmanager
def translate_errors(action: str):
    try:
        yield
    except google_exceptions.NotFound as e:
        raise DocumentNotFoundError(f"{action}: document not found") from e
    except google_exceptions.PermissionDenied as e:
        logger.warning("firestore_permission_denied", action=action, error=str(e))
        raise PermissionDeniedError(f"{action}: permission denied") from e
    except google_exceptions.ServiceUnavailable as e:
        logger.warning("firestore_unavailable", action=action, error=str(e))
        raise ServiceUnavailableError(f"{action}: service unavailable") from e
    except google_exceptions.FailedPrecondition as e:
        if "index" in str(e).lower():
            # Normal on first use of a new equality + order_by combination
            logger.info("firestore_index_required", action=action, error=str(e))
            raise MissingIndexError(f"{action}: the query requires an index. {e.message}") from e
        raise DataAccessError(f"{action}: {e.message}") from e
    except google_exceptions.GoogleAPICallError as e:
        logger.error("firestore_error", action=action, error=str(e))
        raise DataAccessError(f"{action}: {e.message}") from e


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, client: Optional[firestore.Client] = None, project: Optional[str] = None):
        self._client = client or firestore.Client(project=project)

    def add(self, collection: str, data: dict) -> str:
        with translate_errors(f"add to {collection}"):
            _, ref = self._client.collection(collection).add(data)
        return ref.id

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        with translate_errors(f"get {collection}/{doc_id}"):
            snap = self._client.collection(collection).document(doc_id).get()
        if not snap.exists:
            return None
        return {"id": snap.id, **(snap.to_dict() or {})}

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        with translate_errors(f"update {collection}/{doc_id}"):
            self._client.collection(collection).document(doc_id).update(changes)

    def delete(self, collection: str, doc_id: str) -> None:
        with translate_errors(f"delete {collection}/{doc_id}"):
            self._client.collection(collection).document(doc_id).delete()

    def query(
        self,
        collection: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[dict]:
        q = self._client.collection(collection)
        for field, value in filters:
            q = q.where(filter=FieldFilter(field, "==", value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            q = q.order_by(order_by, direction=direction)
        with translate_errors(f"query {collection}"):
            return [{"id": snap.id, **(snap.to_dict() or {})} for snap in q.stream()]
