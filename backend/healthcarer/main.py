# backend/healthcarer/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from .config import Settings, get_settings
from .errors import StoreConnectivityError, ValidationError
from .redis_client import create_redis_client
from .routers import slots
from .services.slots import BookingService, SlotsRedisStore

logger = logging.getLogger(__name__)


def _setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def create_app(
    service: BookingService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the API app.

    With `service` given the app uses it as is (tests, embedding).
    Otherwise a Redis-backed service is created on startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.redis = None
        if service is not None:
            app.state.booking_service = service
            yield
            return

        redis = create_redis_client(settings)
        app.state.redis = redis
        app.state.booking_service = BookingService(
            store=SlotsRedisStore(redis, settings.redis_key_prefix),
            catalogue=settings.catalogue_config(),
            init_workers=settings.init_workers,
        )
        logger.info(f"Slot store: Redis at {settings.redis_url}")
        try:
            yield
        finally:
            redis.close()

    app = FastAPI(title="HealthCarer Booking API", lifespan=lifespan)
    app.include_router(slots.router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"success": False, "error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        detail = f"Invalid fields: {', '.join(fields)}" if fields else "Invalid request"
        return JSONResponse(status_code=400, content={"success": False, "error": detail})

    @app.exception_handler(StoreConnectivityError)
    async def store_error_handler(request: Request, exc: StoreConnectivityError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=500, content={"success": False, "error": exc.message})

    @app.get("/health")
    def health(request: Request):
        body = {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}
        redis = getattr(request.app.state, "redis", None)
        if redis is not None:
            try:
                body["redis"] = redis.ping()
            except RedisError:
                logger.warning("Redis ping failed", exc_info=True)
                body["redis"] = False
        return body

    _setup_logging(settings)
    return app


app = create_app()
