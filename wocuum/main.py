import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from wocuum.config import Settings, get_settings, settings as default_settings
from wocuum.db import SessionLocal, check_connection, get_db, init_database
from wocuum.errors import ServiceError, TooManyRequests
from wocuum.routers import bookings, users
from wocuum.utils.log import RequestLoggingMiddleware, setup_logging
from wocuum.utils.rate_limit import record_failed_attempt
from wocuum.utils.sanitization import SanitizationMiddleware
from wocuum.utils.scheduler import SessionSweeper
from wocuum.utils.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        "lifespan for initing database and the session sweeper"
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
        init_database()
        sweeper = SessionSweeper(
            SessionLocal,
            interval_seconds=settings.SESSION_CLEANUP_INTERVAL_SECONDS,
            max_age_seconds=settings.SESSION_MAX_AGE_SECONDS,
        )
        sweeper.start()
        yield
        await sweeper.stop()
        logger.info("Shutting down")

    app = FastAPI(
        lifespan=lifespan,
        title=settings.PROJECT_NAME,
        description="Booking and account API for the Workday-Vacuumers car cleaning service.",
        version="0.1.0",
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    # Starlette runs the last added middleware first: logging wraps the
    # security headers, then CORS, then sanitization.
    app.add_middleware(SanitizationMiddleware)
    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    if settings is not default_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(users.router)
    app.include_router(bookings.router)

    @app.get("/healthz", tags=["health"])
    def healthz(db: Session = Depends(get_db)):
        try:
            check_connection(db)
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"ok": False, "message": "Database connection failed"},
            )
        return {"ok": True, "message": "Database connection successful"}

    return app


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if not isinstance(exc, TooManyRequests):
            record_failed_attempt(request)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        record_failed_attempt(request)
        route = request.scope.get("route")
        message = users.VALIDATION_MESSAGES.get(getattr(route, "name", None), "Invalid request")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder({"ok": False, "message": message, "errors": exc.errors()}),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "message": "Internal server error"},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("wocuum.main:app", host="0.0.0.0", port=default_settings.PORT)
