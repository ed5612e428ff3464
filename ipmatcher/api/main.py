from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ipmatcher.api.routes import ALL_ROUTERS
from ipmatcher.core.errors import ConfigurationError, IpMatcherError, ValidationError
from ipmatcher.core.metrics import record_http_request
from ipmatcher.seed import apply_seed, load_seed_file
from ipmatcher.services.matcher import Matcher
from ipmatcher.settings import Settings, get_settings

logger = logging.getLogger("ipmatcher")


def _lifespan(
    *,
    settings: Settings | None = None,
    injected_matcher: Matcher | None = None,
):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved_settings = settings or get_settings()
        app.state.settings = resolved_settings

        if injected_matcher is not None:
            matcher = injected_matcher
        else:
            matcher = Matcher.from_settings(resolved_settings)

        if resolved_settings.seed_file:
            count = apply_seed(matcher, load_seed_file(resolved_settings.seed_file))
            logger.info(
                "seed_loaded",
                extra={"extra": {"seed_file": resolved_settings.seed_file, "count": count}},
            )

        app.state.matcher = matcher
        try:
            yield
        finally:
            app.state.matcher = None

    return lifespan


def _install_observability_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_middleware(request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request_failed",
                extra={
                    "request_id": request_id,
                    "extra": {
                        "route": request.url.path,
                        "status_code": 500,
                        "latency_ms": duration_ms,
                    },
                },
            )
            record_http_request(
                method=request.method,
                route=request.url.path,
                status_code=500,
                duration_ms=duration_ms,
            )
            raise

        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request_completed",
            extra={
                "request_id": request_id,
                "extra": {
                    "route": request.url.path,
                    "status_code": response.status_code,
                    "latency_ms": duration_ms,
                },
            },
        )
        record_http_request(
            method=request.method,
            route=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        return response


def _install_security_headers_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cache-Control", "no-store")

        return response


def _install_exception_handlers(app: FastAPI) -> None:
    """Install custom exception handlers for standardized error responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(
            "validation_error",
            extra={"extra": {"error": exc.message, "field": exc.field}},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=exc.to_dict(),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        logger.error(
            "configuration_error",
            extra={"extra": {"error": exc.message, "details": exc.details}},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal configuration error"},
        )

    @app.exception_handler(IpMatcherError)
    async def generic_error_handler(request: Request, exc: IpMatcherError):
        logger.error(
            "unhandled_ipmatcher_error",
            extra={"extra": {"error": exc.message, "details": exc.details}},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(
    *,
    settings: Settings | None = None,
    matcher: Matcher | None = None,
) -> FastAPI:
    resolved_settings = settings or get_settings()

    app = FastAPI(
        title="ipmatcher",
        version="0.1.0",
        docs_url="/docs" if resolved_settings.enable_api_docs else None,
        redoc_url="/redoc" if resolved_settings.enable_api_docs else None,
        openapi_url="/openapi.json" if resolved_settings.enable_api_docs else None,
        lifespan=_lifespan(settings=resolved_settings, injected_matcher=matcher),
    )

    _install_security_headers_middleware(app)
    _install_observability_middleware(app)
    _install_exception_handlers(app)

    for router in ALL_ROUTERS:
        app.include_router(router)

    return app
