"""
SQL-backed document store for local development and tests.
Every document is one row of the ``documents`` table; filtering and ordering run in Python.
"""
from typing import Any, List, Optional

import structlog
from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..db import Base, make_engine, make_session_factory
from ..models.models import StoredDocument
from .errors import DataAccessError, DocumentNotFoundError
from .store import DocumentStore, Filters

logger = structlog.get_logger(__name__)


def _sort_key(value: Any):
    # Missing values sort before everything else
    return (value is not None, value if value is not None else "")


class SqlDocumentStore(DocumentStore):
    def __init__(self, database_url: str, auto_create: bool = True):
        self.engine = make_engine(database_url)
        self.SessionLocal = make_session_factory(self.engine)
        if auto_create:
            Base.metadata.create_all(bind=self.engine)

    def _row(self, db, collection: str, doc_id: str) -> Optional[StoredDocument]:
        row = db.get(StoredDocument, doc_id)
        if row is None or row.collection != collection:
            return None
        return row

    @staticmethod
    def _as_dict(row: StoredDocument) -> dict:
        return {"id": row.id, **(row.data or {})}

    def add(self, collection: str, data: dict) -> str:
        db = self.SessionLocal()
        try:
            row = StoredDocument(collection=collection, data=jsonable_encoder(data))
            db.add(row)
            db.commit()
            db.refresh(row)
            return row.id
        except SQLAlchemyError as e:
            db.rollback()
            raise DataAccessError(f"Failed to write to {collection}: {e}") from e
        finally:
            db.close()

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        db = self.SessionLocal()
        try:
            row = self._row(db, collection, doc_id)
            return self._as_dict(row) if row is not None else None
        except SQLAlchemyError as e:
            raise DataAccessError(f"Failed to read from {collection}: {e}") from e
        finally:
            db.close()

    def update(self, collection: str, doc_id: str, changes: dict) -> None:
        db = self.SessionLocal()
        try:
            row = self._row(db, collection, doc_id)
            if row is None:
                raise DocumentNotFoundError(f"No document to update: {collection}/{doc_id}")
            # JSON columns only notice reassignment, not in-place mutation
            row.data = {**(row.data or {}), **jsonable_encoder(changes)}
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise DataAccessError(f"Failed to update {collection}/{doc_id}: {e}") from e
        finally:
            db.close()

    def delete(self, collection: str, doc_id: str) -> None:
        db = self.SessionLocal()
        try:
            row = self._row(db, collection, doc_id)
            if row is not None:
                db.delete(row)
                db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise DataAccessError(f"Failed to delete {collection}/{doc_id}: {e}") from e
        finally:
            db.close()

    def query(
        self,
        collection: str,
        filters: Filters = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[dict]:
        db = self.SessionLocal()
        try:
            rows = db.execute(
                select(StoredDocument).where(StoredDocument.collection == collection).order_by(StoredDocument.created_at)
            ).scalars().all()
            docs = [self._as_dict(r) for r in rows]
        except SQLAlchemyError as e:
            raise DataAccessError(f"Failed to query {collection}: {e}") from e
        finally:
            db.close()

        for field, value in filters:
            expected = jsonable_encoder(value)
            docs = [d for d in docs if d.get(field) == expected]
        if order_by:
            docs.sort(key=lambda d: _sort_key(d.get(order_by)), reverse=descending)
        logger.debug("sql_query", collection=collection, filters=list(filters), order_by=order_by, count=len(docs))
        return docs
