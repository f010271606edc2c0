"""
File upload server routes.

Each upload route writes into the directory named by its UploadTarget and
answers with a path under that target's static prefix. No authentication.
"""
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from ..config import Settings, UploadTarget
from ..schemas.files import UploadedFile, UploadResponse
from ..storage.provider import StorageProvider, UploadTooLarge
from .deps import get_delete_storage, get_settings, get_upload_storages

router = APIRouter(tags=["uploads"])
logger = structlog.get_logger(__name__)


def public_base_url(request: Request, settings: Settings) -> str:
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return f"{request.url.scheme}://localhost:{settings.port}"


def _is_upload(value) -> bool:
    # Plain text parts of the form come through as str
    return hasattr(value, "file") and hasattr(value, "filename")


async def _upload_from_form(route_name: str, request: Request, settings: Settings, storages) -> UploadResponse:
    form = await request.form()
    return await run_in_threadpool(_store_upload, route_name, request, form.get("file"), settings, storages)


def _store_upload(
    route_name: str,
    request: Request,
    file: Any,
    settings: Settings,
    storages: dict[str, StorageProvider],
) -> UploadResponse:
    if not _is_upload(file) or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    target: UploadTarget = settings.upload_targets[route_name]
    storage = storages[target.directory]
    try:
        stored = storage.save(file.file, file.filename, max_bytes=settings.max_upload_bytes)
    except UploadTooLarge:
        logger.warning("upload_too_large", route=route_name, originalname=file.filename)
        raise HTTPException(status_code=413, detail="File too large")
    except OSError as e:
        logger.error("upload_failed", route=route_name, error=str(e))
        raise HTTPException(status_code=500, detail="File upload failed")
    finally:
        file.file.close()

    path = f"{target.public_prefix}/{stored.filename}"
    return UploadResponse(
        message="File uploaded successfully",
        file=UploadedFile(
            filename=stored.filename,
            originalname=stored.originalname,
            size=stored.size,
            path=path,
            url=f"{public_base_url(request, settings)}{path}",
        ),
    )


@router.get("/")
def root():
    return {"message": "File upload server is running"}


@router.post("/upload", response_model=UploadResponse)
async def upload(
    request: Request,
    settings: Settings = Depends(get_settings),
    storages: dict[str, StorageProvider] = Depends(get_upload_storages),
):
    """Expense attachments."""
    return await _upload_from_form("upload", request, settings, storages)


@router.post("/admin-upload", response_model=UploadResponse)
async def admin_upload(
    request: Request,
    settings: Settings = Depends(get_settings),
    storages: dict[str, StorageProvider] = Depends(get_upload_storages),
):
    """Message attachments."""
    return await _upload_from_form("admin-upload", request, settings, storages)


@router.delete("/file/{filename}")
def delete_file(filename: str, storage: StorageProvider = Depends(get_delete_storage)):
    try:
        deleted = storage.delete(filename)
    except OSError as e:
        logger.error("delete_failed", filename=filename, error=str(e))
        raise HTTPException(status_code=500, detail="File deletion failed")
    if not deleted:
        raise HTTPException(status_code=404, detail="File not found")
    return {"message": "File deleted successfully"}
