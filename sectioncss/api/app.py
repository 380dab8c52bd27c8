"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and makes sure the public storage
directory exists.  The output store is shared across requests via
``request.app.state.store``; tests swap it for a
:class:`~sectioncss.purge.storage.MemoryStore`.

Routers
-------
    /api/purge  — per-section CSS purge of a page
    /health     — liveness probe

Everything else is served from the public directory, so the ``url`` of each
reported artifact resolves to the written file.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sectioncss.api.routers import purge as purge_router
from sectioncss.config import settings
from sectioncss.purge.errors import PurgeFailure
from sectioncss.purge.storage import FileSystemStore


def configure_logging(level: str) -> None:
    """Attach a stdout handler to the package logger at *level*."""
    package_logger = logging.getLogger("sectioncss")
    package_logger.setLevel(level.upper())
    if not any(isinstance(h, logging.StreamHandler) for h in package_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        package_logger.addHandler(handler)


async def purge_failure_handler(request: Request, exc: PurgeFailure) -> JSONResponse:
    """Render a terminal purge failure as ``{"message": ...}``."""
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


def create_app(public_dir: Path | None = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    root = Path(public_dir) if public_dir is not None else settings.public_dir

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        root.mkdir(parents=True, exist_ok=True)
        yield

    app = FastAPI(
        title="Section CSS API",
        description=(
            "Fetches a page and its stylesheets and writes one reduced CSS "
            "file per identified section of the page's <main> element."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = FileSystemStore(root)

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PurgeFailure, purge_failure_handler)

    app.include_router(purge_router.router, prefix="/api/purge", tags=["purge"])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # Mounted last so the API routes above take precedence.
    app.mount("/", StaticFiles(directory=root, check_dir=False), name="public")

    return app


# Module-level instance used by uvicorn:
#   uvicorn sectioncss.api.app:app --reload
app = create_app()
