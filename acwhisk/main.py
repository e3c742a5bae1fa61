import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from acwhisk.api.v1.api import api_router, tags_metadata
from acwhisk.config import settings
from acwhisk.core.exceptions import (
    AppException,
    InvalidArgumentError,
    RequestTimeoutError,
    ServiceError,
    StoreError,
)
from acwhisk.core.logging_config import configure_logging
from acwhisk.core.store import KeyValueStore, cleanup_store, get_store, init_store

logger = logging.getLogger(__name__)


def _error_response(request: Request, exc: AppException) -> JSONResponse:
    body = exc.to_dict()
    if isinstance(exc, ServiceError) and not settings.debug:
        body = {"error": exc.error, "message": "Something went wrong"}
    body["request_id"] = getattr(request.state, "request_id", None)
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app(store: Optional[KeyValueStore] = None) -> FastAPI:
    """
    Application factory.

    Args:
        store: Store to use instead of the configured backend (tests pass an
            in-memory store here)
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan events.

        Connects the key-value store at startup and closes it at shutdown.
        A store that cannot be reached aborts startup.
        """
        logger.info(f"Starting {settings.app_name} (Environment: {settings.environment})")
        await init_store(store)
        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application")
        await cleanup_store()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Social graph, feed and messaging service for a culinary-education community",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Registered before the request-id middleware so it runs inside it
    @app.middleware("http")
    async def enforce_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(
                call_next(request), timeout=settings.request_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(f"Request timed out: {request.method} {request.url.path}")
            return _error_response(request, RequestTimeoutError())

    # Request ID middleware for tracing
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({process_time * 1000:.1f}ms)"
        )
        return response

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        if isinstance(exc, ServiceError):
            logger.error(f"Service failure on {request.method} {request.url.path}: {exc.message}")
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", [])), "msg": error.get("msg")}
            for error in exc.errors()
        ]
        return _error_response(
            request, InvalidArgumentError("Invalid request body", {"errors": errors})
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "InternalError",
                "message": str(exc) if settings.debug else "Something went wrong",
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        try:
            store_ok = await get_store().ping()
        except StoreError:
            store_ok = False

        return {
            "status": "healthy" if store_ok else "degraded",
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "timestamp": time.time(),
            "store": "ok" if store_ok else "unavailable",
        }

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to {settings.app_name}!",
            "docs_url": "/docs",
            "version": settings.app_version,
        }

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


# Create the application instance
app = create_app()
