"""FastAPI application factory, error handling and health route.

WHY: The browser front end talks to one HTTP API for courses, homework,
progress and captions. FastAPI gives request validation and OpenAPI docs
for free; an app factory lets tests build isolated apps with their own
data directory and a fake transcription client.

HOW: create_app() stores the JSONStore and the AssemblyAI client factory
on ``app.state``, installs CORS (the front end is served from a different
origin during development), registers exception handlers that render every
error in the platform's ``{"success": false, "message": ...}`` envelope,
and mounts the platform and subtitle routers.

RULES:
- No module-level store or client is used by routes (only app.state)
- HTTPException → its own status; StorageError → 500
- AssemblyAIAPIError / httpx.HTTPError → 502; InvalidInputError → 422
- ``app`` at module level exists only for ``uvicorn`` and run_api()
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accessible_learning import __version__
from accessible_learning.api.client import AssemblyAIAPIError, AssemblyAIClient
from accessible_learning.captions import InvalidInputError
from accessible_learning.config import API_HOST, API_PORT
from accessible_learning.server import platform, subtitles
from accessible_learning.server.dependencies import ClientFactory
from accessible_learning.server.models import HealthResponse
from accessible_learning.storage import JSONStore, StorageError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(422, "Invalid request body", errors=jsonable_encoder(exc.errors()))

    @app.exception_handler(InvalidInputError)
    async def _invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
        return _error(422, str(exc))

    @app.exception_handler(StorageError)
    async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return _error(500, str(exc))

    @app.exception_handler(AssemblyAIAPIError)
    async def _upstream_error(request: Request, exc: AssemblyAIAPIError) -> JSONResponse:
        logger.error("AssemblyAI request failed on %s: %s", request.url.path, exc)
        return _error(502, "AssemblyAI request failed", error=exc.message)

    @app.exception_handler(httpx.HTTPError)
    async def _network_error(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.error("AssemblyAI unreachable on %s: %s", request.url.path, exc)
        return _error(502, "AssemblyAI request failed", error=str(exc))


def create_app(
    store: Optional[JSONStore] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    """Build the API application.

    Args:
        store: Document store; defaults to one rooted at config.DATA_DIR.
        client_factory: Zero-argument callable returning a fresh
            AssemblyAIClient; defaults to the class itself, which reads
            the API key from the environment.
    """
    app = FastAPI(
        title="Accessible Learning Platform API",
        description=(
            "REST API for courses, homework, student progress and captions. "
            "Caption files are generated from AssemblyAI word timestamps "
            "as WebVTT or SRT."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store if store is not None else JSONStore()
    app.state.client_factory = client_factory or AssemblyAIClient

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    app.include_router(platform.router)
    app.include_router(subtitles.router)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


app = create_app()


def run_api(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Entry point for the accessible-learning-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Data directory: %s", app.state.store.data_dir.resolve())
    uvicorn.run(app, host=host or API_HOST, port=port or API_PORT)
