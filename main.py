#!/usr/bin/env python3

"""
Main application entry point for the to-do API service.

Architecture: FastAPI application with an async SQLAlchemy store and cookie session auth.
Key Features: Lifecycle management, database health checks, error handling, CORS configuration.
"""

import asyncio
import errno
import sys
import traceback
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from todo_api.api.auth import router as auth_router
from todo_api.api.tasks import router as tasks_router
from todo_api.config import Settings, get_settings
from todo_api.db import (
    check_db_connection,
    close_db,
    create_engine_from_settings,
    create_session_factory,
    init_db,
)
from todo_api.db_handlers import ErrorLogDBHandler, TaskDBHandler, UserDBHandler
from todo_api.exceptions import AppError
from todo_api.services.auth_service import AuthService
from todo_api.services.mail_service import OtpMailer
from todo_api.services.task_service import TaskService
from todo_api.utils.auth import TokenManager
from todo_api.utils.logger import setup_logger

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = app.state.engine

    logger.info("Application startup...")
    try:
        logger.info("Initializing database...")
        await init_db(engine, settings.db_schema)
        logger.info("Database initialization complete.")

        logger.info("Checking database connectivity...")
        await check_db_connection(engine)
        logger.info("Database connectivity confirmed.")
    except Exception as e:
        logger.critical(f"Startup error: {e}")
        raise SystemExit(f"Startup failed: {e}") from e

    logger.info("Todo API startup successful.")
    yield

    logger.info("Todo API shutdown...")
    await close_db(engine)
    logger.info("Shutdown complete.")


def _format_validation_errors(exc: RequestValidationError) -> str:
    fields = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        fields.append(f"{loc or 'body'}: {error.get('msg', 'invalid')}")
    return "; ".join(fields)


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": f"Invalid request: {_format_validation_errors(exc)}"},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in [errno.ETIMEDOUT, errno.ECONNREFUSED]:
            logger.error(
                f"Returning 503 due to DB connection issue: {app.state.settings.db_unavailable_hint}"
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"message": app.state.settings.db_unavailable_hint},
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        try:
            await app.state.error_log_handler.record(
                error_message=str(exc) or type(exc).__name__,
                stack_trace="".join(traceback.format_exception(exc)),
                path=request.url.path,
            )
        except (SQLAlchemyError, OSError) as log_exc:
            logger.warning(f"Could not record error log: {log_exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Todo API", lifespan=lifespan)

    # Process-wide components, built once and shared by all requests
    engine = create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)
    token_manager = TokenManager(
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.token_manager = token_manager
    app.state.auth_service = AuthService(
        UserDBHandler(session_factory),
        token_manager,
        otp_ttl=timedelta(minutes=settings.otp_expire_minutes),
    )
    app.state.task_service = TaskService(TaskDBHandler(session_factory))
    app.state.error_log_handler = ErrorLogDBHandler(session_factory)
    app.state.mailer = OtpMailer.from_settings(settings)

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_timeout_middleware(request: Request, call_next):
        try:
            return await asyncio.wait_for(
                call_next(request), timeout=settings.request_timeout_seconds
            )
        except TimeoutError:
            logger.error(
                f"Request {request.method} {request.url.path} timed out after "
                f"{settings.request_timeout_seconds}s"
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={"message": "Request timed out"},
            )

    @app.get("/")
    async def root():
        return {"message": "Todo API is running"}

    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


def main():
    settings = get_settings()

    logger.info(f"Starting Todo API server on {settings.server_host}:{settings.server_port}")

    try:
        # Import string + factory so every worker process builds its own app
        uvicorn.run(
            "main:create_app",
            factory=True,
            host=settings.server_host,
            port=settings.server_port,
            workers=settings.server_workers,
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
