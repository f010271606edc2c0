"""Tests for the upload client against the real app and against failing transports."""

from __future__ import annotations

import io
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from expense_portal.client import FileMetadataStore, FileServiceError, UploadClient, UploadServerUnreachable
from expense_portal.client.upload_client import safe_download_name
from expense_portal.schemas.files import FileMetadata


@pytest.fixture
def metadata(tmp_path) -> FileMetadataStore:
    return FileMetadataStore(tmp_path / "meta" / "files.json")


@pytest.fixture
def upload_client(app, metadata) -> UploadClient:
    return UploadClient(base_url="http://testserver", metadata=metadata, http_client=TestClient(app))


def _failing_client(metadata, handler, base_url: str = "http://localhost:3002") -> UploadClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return UploadClient(base_url=base_url, metadata=metadata, http_client=http)


class TestSaveFiles:
    def test_message_file_goes_to_admin_upload(self, upload_client, metadata, settings, tmp_path) -> None:
        saved = upload_client.save_message_file(b"%PDF-1.4 test", file_name="Brief.pdf")
        assert saved.file_name == "Brief.pdf"
        assert "/admin-attachments/" in saved.url

        meta = upload_client.get_file_metadata(saved.file_id)
        assert meta is not None
        assert meta.original_name == "Brief.pdf"
        assert meta.type == "application/pdf"
        assert meta.size == len(b"%PDF-1.4 test")
        assert (tmp_path / "uploads" / "admin" / meta.stored_name).exists()

    def test_expense_file_goes_to_upload(self, upload_client, tmp_path) -> None:
        saved = upload_client.save_expense_file(io.BytesIO(b"receipt"), file_name="receipt.png")
        assert "/message-attachments/" in saved.url
        meta = upload_client.get_file_metadata(saved.file_id)
        assert (tmp_path / "uploads" / "users" / meta.stored_name).read_bytes() == b"receipt"

    def test_upload_from_path(self, upload_client, tmp_path) -> None:
        source = tmp_path / "notes.txt"
        source.write_text("hello")
        saved = upload_client.save_expense_file(source)
        assert saved.file_name == "notes.txt"

    def test_raw_bytes_need_a_name(self, upload_client) -> None:
        with pytest.raises(FileServiceError, match="file_name is required"):
            upload_client.save_expense_file(b"data")


class TestMetadataAndDownload:
    def test_metadata_lifecycle(self, upload_client) -> None:
        first = upload_client.save_message_file(b"a", file_name="a.txt")
        second = upload_client.save_message_file(b"b", file_name="b.txt")
        assert {m.id for m in upload_client.get_all_file_metadata()} == {first.file_id, second.file_id}

        assert upload_client.delete_file_metadata(first.file_id) is True
        assert upload_client.get_file_metadata(first.file_id) is None

        upload_client.clear_all_file_metadata()
        assert upload_client.get_all_file_metadata() == []

    def test_download_file(self, upload_client, tmp_path) -> None:
        saved = upload_client.save_message_file(b"report body", file_name="Q1 Report.txt")
        target = upload_client.download_file(saved.file_id, tmp_path / "downloads")
        assert target.name == "q1-report.txt"
        assert target.read_bytes() == b"report body"

    def test_download_unknown_id(self, upload_client, tmp_path) -> None:
        with pytest.raises(FileServiceError, match="Failed to download file: File not found"):
            upload_client.download_file("missing", tmp_path)

    def test_delete_remote_file(self, upload_client) -> None:
        saved = upload_client.save_message_file(b"x", file_name="x.txt")
        stored = upload_client.get_file_metadata(saved.file_id).stored_name
        assert upload_client.delete_remote_file(stored) is True
        assert upload_client.delete_remote_file(stored) is False

    def test_corrupt_metadata_reads_as_empty(self, metadata) -> None:
        metadata.path.parent.mkdir(parents=True)
        metadata.path.write_text("{not json")
        assert metadata.all() == []


class TestFailures:
    def test_connection_refused(self, metadata) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _failing_client(metadata, handler)
        with pytest.raises(FileServiceError) as exc:
            client.save_message_file(b"x", file_name="x.txt")
        assert str(exc.value) == (
            "Failed to connect to file upload server. Please ensure the server is running on port 3002."
        )
        assert metadata.all() == []

    def test_timeout_reports_connection_failure(self, metadata) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = _failing_client(metadata, handler, base_url="http://files.internal:8080")
        with pytest.raises(FileServiceError, match="running on port 8080"):
            client.save_expense_file(b"x", file_name="x.txt")

    def test_server_error_body_is_reported(self, metadata) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "File upload failed"})

        client = _failing_client(metadata, handler)
        with pytest.raises(FileServiceError) as exc:
            client.save_message_file(b"x", file_name="x.txt")
        assert str(exc.value).startswith("Failed to upload file to server: 500 Internal Server Error - ")
        assert "File upload failed" in str(exc.value)
        assert "Failed to save message file" not in str(exc.value)
        assert metadata.all() == []

    def test_download_connection_failure_is_not_rewrapped(self, metadata, tmp_path) -> None:
        metadata.add(
            FileMetadata(
                id="f1",
                original_name="brief.pdf",
                stored_name="file-1-2.pdf",
                path="/admin-attachments/file-1-2.pdf",
                size=3,
                type="application/pdf",
                upload_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )
        )

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _failing_client(metadata, handler)
        with pytest.raises(UploadServerUnreachable) as exc:
            client.download_file("f1", tmp_path / "out")
        assert str(exc.value) == (
            "Failed to connect to file upload server. Please ensure the server is running on port 3002."
        )

    def test_download_http_error_is_prefixed(self, metadata, tmp_path) -> None:
        metadata.add(
            FileMetadata(
                id="f2",
                original_name="gone.pdf",
                stored_name="file-3-4.pdf",
                path="/admin-attachments/file-3-4.pdf",
                size=3,
                type="application/pdf",
                upload_date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )
        )
        client = _failing_client(metadata, lambda request: httpx.Response(404))
        with pytest.raises(FileServiceError, match="^Failed to download file: Failed to fetch file: 404"):
            client.download_file("f2", tmp_path / "out")

    def test_timeout_defaults_from_settings(self, metadata) -> None:
        client = UploadClient(base_url="http://localhost:3002", metadata=metadata)
        try:
            assert client.timeout == 10.0
        finally:
            client.close()


def test_safe_download_name() -> None:
    assert safe_download_name("Résumé Final.PDF") == "resume-final.pdf"
    assert safe_download_name("???.txt") == "download.txt"
