"""Static file server: FastAPI application mounting one SQLiteFS."""

from __future__ import annotations

import logging
import mimetypes
from contextlib import asynccontextmanager
from email.utils import format_datetime

import sentry_sdk
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from sqlitefs.config import AppConfig
from sqlitefs.fs.filesystem import SQLiteFS

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup, close it on shutdown."""
    fs: SQLiteFS = app.state.fs
    fs.validate()
    fs.provision()

    yield

    fs.cleanup()
    logger.info("Application shutdown complete")


def _init_sentry(dsn: str, environment: str) -> None:
    """Initialize Sentry SDK if a DSN is configured and not in development."""
    if not dsn or environment == "development":
        return
    sentry_sdk.init(
        dsn,
        environment=environment,
        traces_sample_rate=0,
        send_client_reports=False,
        auto_session_tracking=False,
    )


def _file_response(fs: SQLiteFS, name: str, head: bool) -> Response:
    try:
        with fs.open(name) as f:
            info = f.stat()
            if info.is_dir:
                raise FileNotFoundError(name)
            body = f.read()
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Not found") from None

    media_type = mimetypes.guess_type(info.name)[0] or "application/octet-stream"
    headers = {"Content-Length": str(info.size)}
    if info.mtime is not None:
        headers["Last-Modified"] = format_datetime(info.mod_time, usegmt=True)

    return Response(content=b"" if head else body, media_type=media_type, headers=headers)


def create_app(config: AppConfig | None = None, fs: SQLiteFS | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        config = AppConfig.from_yaml()

    _init_sentry(config.sentry_dsn, config.environment)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.server.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="sqlitefs",
        version="0.1.0",
        description="Static files served from SQLite rows",
        lifespan=lifespan,
        debug=config.environment == "development",
        # Every path besides the health check belongs to stored entries
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.fs = fs if fs is not None else SQLiteFS.from_config(config.database)

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.api_route("/{path:path}", methods=["GET", "HEAD"])
    def serve(request: Request, path: str) -> Response:
        # Decoded request path, looked up verbatim with its leading slash
        return _file_response(request.app.state.fs, request.scope["path"], request.method == "HEAD")

    return app


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    config = AppConfig.from_yaml()
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level,
    )
