"""Tests for the Firestore store's error translation and query building."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from expense_portal.documents import (
    DataAccessError,
    DocumentNotFoundError,
    MissingIndexError,
    PermissionDeniedError,
    ServiceUnavailableError,
)
from expense_portal.documents.firestore_store import FirestoreDocumentStore


def _snapshot(doc_id: str, data: dict, exists: bool = True) -> MagicMock:
    snap = MagicMock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    return snap


@pytest.fixture
def fs_client() -> MagicMock:
    client = MagicMock()
    collection = client.collection.return_value
    collection.where.return_value = collection
    collection.order_by.return_value = collection
    return client


class TestFirestoreDocumentStore:
    def test_add_returns_document_id(self, fs_client) -> None:
        ref = MagicMock()
        ref.id = "abc"
        fs_client.collection.return_value.add.return_value = (None, ref)
        store = FirestoreDocumentStore(client=fs_client)
        assert store.add("messages", {"subject": "hi"}) == "abc"
        fs_client.collection.assert_called_with("messages")

    def test_get_missing_returns_none(self, fs_client) -> None:
        fs_client.collection.return_value.document.return_value.get.return_value = _snapshot("x", {}, exists=False)
        store = FirestoreDocumentStore(client=fs_client)
        assert store.get("expenses", "x") is None

    def test_get_includes_id(self, fs_client) -> None:
        fs_client.collection.return_value.document.return_value.get.return_value = _snapshot("e1", {"amount": 12.5})
        store = FirestoreDocumentStore(client=fs_client)
        assert store.get("expenses", "e1") == {"id": "e1", "amount": 12.5}

    def test_query_applies_filters_and_descending_order(self, fs_client) -> None:
        collection = fs_client.collection.return_value
        collection.stream.return_value = [_snapshot("m1", {"receiverId": "u"})]
        store = FirestoreDocumentStore(client=fs_client)

        result = store.query("messages", filters=[("receiverId", "u")], order_by="timestamp", descending=True)

        assert result == [{"id": "m1", "receiverId": "u"}]
        field_filter = collection.where.call_args.kwargs["filter"]
        assert (field_filter.field_path, field_filter.op_string, field_filter.value) == ("receiverId", "==", "u")
        order_args = collection.order_by.call_args
        assert order_args.args == ("timestamp",)
        assert order_args.kwargs["direction"] == "DESCENDING"

    @pytest.mark.parametrize(
        "google_error, expected",
        [
            (google_exceptions.PermissionDenied("Missing or insufficient permissions."), PermissionDeniedError),
            (google_exceptions.ServiceUnavailable("backend down"), ServiceUnavailableError),
            (google_exceptions.FailedPrecondition("The query requires an index. Create it here"), MissingIndexError),
            (google_exceptions.FailedPrecondition("transaction expired"), DataAccessError),
            (google_exceptions.InternalServerError("oops"), DataAccessError),
        ],
    )
    def test_query_errors_are_translated(self, fs_client, google_error, expected) -> None:
        fs_client.collection.return_value.stream.side_effect = google_error
        store = FirestoreDocumentStore(client=fs_client)
        with pytest.raises(expected) as exc:
            store.query("messages", filters=[("senderId", "admin")], order_by="timestamp", descending=True)
        assert type(exc.value) is expected
        assert exc.value.__cause__ is google_error

    def test_update_missing_document(self, fs_client) -> None:
        fs_client.collection.return_value.document.return_value.update.side_effect = google_exceptions.NotFound("gone")
        store = FirestoreDocumentStore(client=fs_client)
        with pytest.raises(DocumentNotFoundError):
            store.update("messages", "m1", {"read": True})
