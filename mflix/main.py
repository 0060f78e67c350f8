"""
FastAPI application entry point for the mflix backend.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.comments import router as comments_router
from .api.health import router as health_router
from .api.users import router as users_router
from .core.config import get_settings
from .core.exceptions import AppError
from .database.mongodb import MongoDB
from .database.repositories.comment_repository import CommentRepository
from .database.repositories.user_repository import UserRepository

logging.basicConfig(level=logging.INFO)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management for the database connection."""
    settings = get_settings()

    logger.info("Starting mflix backend", environment=settings.environment)

    mongodb = MongoDB()

    try:
        await mongodb.connect(settings.mongodb_url)

        users = mongodb.get_collection(settings.users_collection)
        sessions = mongodb.get_collection(settings.sessions_collection)
        comments = mongodb.get_collection(settings.comments_collection)

        await UserRepository(users, sessions).ensure_indexes()
        await CommentRepository(comments, users).ensure_indexes()
        logger.info("Database indexes ensured")

        app.state.mongodb = mongodb
        logger.info("Database connection started")

        yield

    finally:
        await mongodb.disconnect()
        logger.info("Database connection stopped")


def register_exception_handlers(app: FastAPI) -> None:
    """Map AppError subclasses to HTTP responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handle all custom AppError exceptions with proper HTTP status codes."""
        error_dict = exc.to_dict()

        logger.error(
            "Application error occurred",
            path=request.url.path,
            method=request.method,
            **error_dict,
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error_type": exc.error_type},
        )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="mflix API",
        description="Users, sessions and movie comments",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api", tags=["health"])
    app.include_router(users_router)
    app.include_router(comments_router)

    return app


app = create_app()
