from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import Settings, settings as default_settings
from .documents import DataAccessError, DocumentStore, create_document_store
from .logging import setup_logging, RequestIdMiddleware
from .storage.hybrid_provider import FallbackStorageProvider
from .storage.local_provider import LocalStorageProvider
from .routes.uploads import router as uploads_router
from .routes.expenses import router as expenses_router
from .routes.messages import router as messages_router
from .routes.employees import router as employees_router
from .routes.dropdowns import router as dropdowns_router

logger = structlog.get_logger(__name__)


def validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"] if p != "body") or "body"
        parts.append(f"{location}: {err['msg']}")
    return "Invalid request: " + "; ".join(parts)


def build_upload_storages(settings: Settings) -> dict[str, LocalStorageProvider]:
    root = Path(settings.upload_root)
    directories = set(settings.static_mounts.values())
    directories.update(t.directory for t in settings.upload_targets.values())
    directories.update(settings.delete_search_order)
    return {name: LocalStorageProvider(root / name) for name in sorted(directories)}


def build_delete_storage(settings: Settings, storages: dict[str, LocalStorageProvider]):
    chain = [storages[name] for name in settings.delete_search_order]
    provider = chain[-1]
    for earlier in reversed(chain[:-1]):
        provider = FallbackStorageProvider(earlier, provider)
    return provider


def create_app(settings: Optional[Settings] = None, document_store: Optional[DocumentStore] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    app.state.settings = settings
    app.state.document_store = document_store or create_document_store(settings)
    app.state.upload_storages = build_upload_storages(settings)
    app.state.delete_storage = build_delete_storage(settings, app.state.upload_storages)

    # Middlewares; the last added is outermost
    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",  # reflect any origin, credentials included
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content={"error": validation_message(exc)})

    @app.exception_handler(DataAccessError)
    async def data_error(request: Request, exc: DataAccessError):
        logger.warning("data_access_error", error=exc.message, kind=type(exc).__name__)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Routers
    app.include_router(uploads_router)
    app.include_router(expenses_router)
    app.include_router(messages_router)
    app.include_router(employees_router)
    app.include_router(dropdowns_router)

    # Static attachments
    for prefix, directory in settings.static_mounts.items():
        storage = app.state.upload_storages[directory]
        app.mount(prefix, StaticFiles(directory=str(storage.base_dir)), name=prefix.strip("/"))

    # Metrics
    if settings.enable_metrics:
        Instrumentator().instrument(app).expose(app)

    logger.info(
        "app_created",
        upload_root=settings.upload_root,
        document_store=type(app.state.document_store).__name__,
    )
    return app


app = create_app()
