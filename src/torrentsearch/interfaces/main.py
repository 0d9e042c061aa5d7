from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from torrentsearch.domain.providers.exceptions import (
    ConfigValidationError,
    ProviderNotFoundError,
    StorageError,
)
from torrentsearch.infrastructure.config import AppConfig
from torrentsearch.interfaces.app_state import AppState
from torrentsearch.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigValidationError)
    async def _config_invalid(
        request: Request, exc: ConfigValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    @app.exception_handler(ProviderNotFoundError)
    async def _provider_not_found(
        request: Request, exc: ProviderNotFoundError
    ) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StorageError)
    async def _storage_failed(request: Request, exc: StorageError) -> JSONResponse:
        log.error("storage_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=503, content={"error": "storage_unavailable"})


def build_app(config: AppConfig) -> FastAPI:
    """Build FastAPI app: configuration only, no resource initialization.

    Resources (store, HTTP client, providers) are created in lifespan().
    """
    app = FastAPI(
        title="torrentsearch",
        description="Concurrent torrent search across built-in and Torznab providers",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    _register_error_handlers(app)

    from torrentsearch.interfaces.api.providers.router import (
        router as providers_router,
    )
    from torrentsearch.interfaces.api.search.router import router as search_router
    from torrentsearch.interfaces.api.settings.router import (
        router as settings_router,
    )

    app.include_router(search_router, prefix=API_PREFIX)
    app.include_router(providers_router, prefix=API_PREFIX)
    app.include_router(settings_router, prefix=API_PREFIX)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
