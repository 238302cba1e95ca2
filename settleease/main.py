"""FastAPI application entry point"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settleease.api.v1.router import api_router
from settleease.config import get_settings
from settleease.core.exceptions import AppException
from settleease.core.logging import configure_logging
from settleease.database import dispose_engine
from settleease.services.cache_service import CacheService

settings = get_settings()
configure_logging(settings)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("startup", app_name=settings.app_name)
    yield
    await CacheService.close_redis_client()
    await dispose_engine()
    logger.info("shutdown")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="Balances, debt simplification and settlement payments for shared expenses",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.allowed_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Exception handlers
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle custom application exceptions"""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=str(request.url.path),
            error_type=exc.error_type,
            message=exc.message,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "message": exc.message,
                "type": exc.error_type,
                "path": str(request.url.path),
            }
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.exception("unhandled_exception", path=str(request.url.path))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Internal server error",
                "type": "InternalServerError",
                "path": str(request.url.path),
            }
        },
    )


# Include API v1 router
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - points to docs"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "docs_url": "/docs",
        "version": "1.0.0",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint; reports Redis reachability"""
    cache_ok = await CacheService.health_check()
    return {"status": "healthy", "cache": "ok" if cache_ok else "unavailable"}
