"""
StayEase application entry point
Hotel booking REST API
"""
import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from stayease import __version__
from stayease.config import Settings, get_settings
from stayease.exceptions import (
    StayEaseError, NotFoundError, ForbiddenError, BookingStateError,
    DuplicateUsernameError, InvalidBookingError, StorageUnavailableError
)
from stayease.routers import auth, hotels, bookings, admin
from stayease.services.user_service import UserService
from stayease.storage import Storage, initialize_storage
from stayease.storage.sessions import SessionStore

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    BookingStateError: status.HTTP_400_BAD_REQUEST,
    InvalidBookingError: status.HTTP_400_BAD_REQUEST,
    DuplicateUsernameError: status.HTTP_400_BAD_REQUEST,
}


def _validation_message(exc: RequestValidationError) -> str:
    """First failing field as '<field>: <message>'"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    message = error.get("msg", "Invalid value").removeprefix("Value error, ")
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def _prune_sessions(store: SessionStore, interval_seconds: float):
    while True:
        await asyncio.sleep(interval_seconds)
        removed = await store.prune()
        if removed:
            logger.info(f"Pruned {removed} expired sessions")


def register_exception_handlers(app: FastAPI) -> None:
    """Every error response is {"message": ...}"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(StorageUnavailableError)
    async def storage_exception_handler(request: Request, exc: StorageUnavailableError):
        logger.error(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "Storage backend unavailable"},
        )

    @app.exception_handler(StayEaseError)
    async def domain_exception_handler(request: Request, exc: StayEaseError):
        for error_type, status_code in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                return JSONResponse(status_code=status_code, content={"message": str(exc)})
        logger.exception(f"Unhandled application error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    """Build the application; tests inject their own settings and storage"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle"""
        owns_storage = app.state.storage is None
        if owns_storage:
            app.state.storage = await initialize_storage(settings)
        active: Storage = app.state.storage

        await UserService(active).ensure_admin_user(settings)

        prune_task = asyncio.create_task(
            _prune_sessions(active.session_store, settings.SESSION_PRUNE_INTERVAL_SECONDS)
        )
        logger.info(f"{settings.APP_NAME} started with {active.name} storage")

        yield

        prune_task.cancel()
        with suppress(asyncio.CancelledError):
            await prune_task
        if owns_storage:
            await active.close()

    app = FastAPI(
        title=f"{settings.APP_NAME} - Hotel Booking API",
        description="Browse hotels, book rooms and manage listings",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.storage = storage

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(hotels.router, prefix="/api")
    app.include_router(bookings.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check"""
        active = app.state.storage
        return {"status": "healthy", "storage": active.name if active else None}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if get_settings().DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("stayease.main:app", host="0.0.0.0", port=8000)
