import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from redis.asyncio import Redis

from app import models  # noqa: F401  registers tables with Base.metadata
from app.cache import ResponseCache
from app.config import Settings, settings
from app.database import Database
from app.middleware.metrics import MetricsMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import RequestIDMiddleware
from app.routers import health, orders, restaurants
from app.services.restaurant_service import seed_sample_data
from app.utils.logging import setup_logging
from app.utils.tracing import setup_tracing

setup_logging(settings.log_level, settings.log_json)
logger = logging.getLogger(__name__)

setup_tracing("food-ordering-api", settings.otlp_endpoint)


def create_app(config: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up, creating database tables")
        database = Database(
            config.database_url,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
        )
        await database.create_all()
        SQLAlchemyInstrumentor().instrument(engine=database.engine.sync_engine)

        if config.seed_sample_data:
            await seed_sample_data(database.session_factory)

        redis = Redis.from_url(config.redis_url, decode_responses=True)
        app.state.database = database
        app.state.redis = redis
        app.state.cache = ResponseCache(redis, ttl=config.cache_ttl)
        logger.info("Startup complete")

        yield

        await redis.aclose()
        await database.dispose()
        logger.info("Shutting down")

    app = FastAPI(
        title="Food Ordering API",
        description="Restaurants, menus and transactional order placement",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.started_at = time.monotonic()

    FastAPIInstrumentor.instrument_app(app)
    # Innermost, so it sees complete bodies and honours minimum_size
    app.add_middleware(GZipMiddleware, minimum_size=config.gzip_minimum_size)
    app.add_middleware(MetricsMiddleware)
    if config.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            max_requests=config.rate_limit_max_requests,
            window_seconds=config.rate_limit_window_seconds,
        )
    app.add_middleware(RequestIDMiddleware)
    # Outermost, so preflight requests are answered before rate limiting
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-RateLimit-Remaining", "Retry-After"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(restaurants.router, prefix="/api", tags=["restaurants"])
    app.include_router(orders.router, prefix="/api/orders", tags=["orders"])

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"request_id": getattr(request.state, "request_id", "unknown")},
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()
