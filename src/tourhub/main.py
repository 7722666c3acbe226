"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown of the long-lived handles
(MongoDB client, Redis pool, payment gateway); they live on app.state
and reach routes through dependencies, never as module globals.
Middleware, CORS, error handlers, and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourhub import __version__
from tourhub.api import api_router
from tourhub.config import settings
from tourhub.errors import AppError, error_body
from tourhub.log import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. MongoDB is required (startup fails without it); Redis is
    optional — the app works without rate limiting.
    """
    from tourhub.cache import close_redis, init_redis
    from tourhub.db.mongo import connect
    from tourhub.services.payment_gateway import StripeGateway

    logger.info(
        "tourhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    app.state.db = connect()
    await app.state.db.ensure_indexes()
    logger.info("tourhub.mongodb_connected", database=settings.mongodb_database)

    try:
        await init_redis()
        logger.info("tourhub.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("tourhub.redis_unavailable", error=str(e))

    app.state.payments = StripeGateway(settings.stripe_secret_key)

    yield

    logger.info("tourhub.shutdown")
    await close_redis()
    await app.state.db.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {error, message, request_id[, details]}."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "http.error",
            code=exc.code,
            status=exc.status_code,
            message=exc.message,
            path=request.url.path,
            context=exc.context,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.message),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        details = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body("bad_request", "Invalid request", details=details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        codes = {404: "not_found", 405: "method_not_allowed"}
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(codes.get(exc.status_code, "http_error"), str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="TourHub",
        description="Tourism booking platform — packages, guides, bookings, payments",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → Security → RateLimit → handler
    # RequestId is outermost so every response, 429s included, carries the id.

    from tourhub.middleware.rate_limit import RateLimitMiddleware
    from tourhub.middleware.request_id import RequestIdMiddleware
    from tourhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": "Server is running"}

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: tourhub.main:app)
app = create_app()
