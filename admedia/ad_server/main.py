"""
AdMedia API server.

Campaign management backend: accounts, campaigns with Cloudinary-hosted
images, and impression / click analytics.
"""

import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admedia.ad_server.middleware.metrics import MetricsMiddleware, metrics_endpoint
from admedia.ad_server.routers import auth, campaign, health
from admedia.common.config import get_settings
from admedia.common.database import close_db, create_tables, init_db
from admedia.common.exceptions import AdMediaError
from admedia.common.logger import clear_log_context, get_logger, log_context
from admedia.common.utils import generate_request_id
from admedia.schemas.response import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    logger.info(
        "Starting AdMedia server",
        version=settings.app_version,
        env=settings.env,
    )

    await init_db()
    if settings.debug:
        await create_tables()

    logger.info("AdMedia server started successfully")

    yield

    logger.info("Shutting down AdMedia server")
    await close_db()
    logger.info("AdMedia server stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="AdMedia API",
        description="API documentation for AdMedia",
        version=settings.app_version,
        docs_url="/api-docs",
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.monitoring.enabled:
        app.add_middleware(MetricsMiddleware)
        app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["monitoring"])

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next: Any) -> Any:
        """Log all requests with timing."""
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        request.state.request_id = request_id
        log_context(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        finally:
            clear_log_context()

        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Request completed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response

    @app.exception_handler(AdMediaError)
    async def admedia_error_handler(request: Request, exc: AdMediaError) -> JSONResponse:
        """Render domain errors with their own status code."""
        logger.warning(
            "AdMedia error",
            error=exc.__class__.__name__,
            message=exc.message,
            details=exc.details,
            status_code=exc.status_code,
        )

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.__class__.__name__,
                message=exc.message,
                details=exc.details or None,
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected errors."""
        logger.error(
            "Unexpected error",
            error=str(exc),
            error_type=exc.__class__.__name__,
            path=request.url.path,
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="InternalServerError",
                message="Something went wrong!",
                request_id=getattr(request.state, "request_id", None),
            ).model_dump(),
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(campaign.router, prefix="/api/campaigns", tags=["campaigns"])

    return app


app = create_app()


def main() -> None:
    """Run the server using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "admedia.ad_server.main:app",
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers,
        reload=settings.server.reload,
        log_level="info" if not settings.debug else "debug",
    )


if __name__ == "__main__":
    main()
