from ..config import Settings
from .errors import (
    DataAccessError,
    DocumentNotFoundError,
    MissingIndexError,
    PermissionDeniedError,
    ServiceUnavailableError,
)
from .store import DocumentStore


def create_document_store(settings: Settings) -> DocumentStore:
    """Pick the backend named by DOCUMENT_STORE."""
    if settings.document_store == "firestore":
        from .firestore_store import FirestoreDocumentStore

        client = None
        if settings.google_application_credentials:
            from google.cloud import firestore

            client = firestore.Client.from_service_account_json(
                settings.google_application_credentials, project=settings.firebase_project_id
            )
        return FirestoreDocumentStore(client=client, project=settings.firebase_project_id)
    from .sql_store import SqlDocumentStore

    return SqlDocumentStore(settings.database_url, auto_create=settings.auto_create_db)


__all__ = [
    "DataAccessError",
    "DocumentNotFoundError",
    "DocumentStore",
    "MissingIndexError",
    "PermissionDeniedError",
    "ServiceUnavailableError",
    "create_document_store",
]
