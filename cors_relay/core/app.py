from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from httpx import AsyncClient

from cors_relay.core.config import AppSettings, settings as default_settings
from cors_relay.core.errors import RelayError, relay_error_handler, unhandled_error_handler
from cors_relay.core.http_client import create_async_client
from cors_relay.core.logging_config import setup_logging
from cors_relay.middlewares.logging_middleware import LoggingMiddleware
from cors_relay.middlewares.metrics_middleware import PrometheusMiddleware, metrics
from cors_relay.middlewares.origin_guard import OriginGuardMiddleware
from cors_relay.schemas.health import HealthCheck
from cors_relay.services.chat_relay import read_limited_body, relay_chat
from cors_relay.services.fetch_relay import relay_fetch

logger = setup_logging()


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_client(request: Request) -> AsyncClient:
    return request.app.state.client


def create_app(settings: AppSettings = default_settings) -> FastAPI:
    """Create and configure the FastAPI application.

    *settings* is read once here and stored on ``app.state``; handlers never
    consult process-wide state at call time.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...", cors_mode=settings.cors_mode)
        app.state.client = create_async_client(settings)
        try:
            yield
        finally:
            await app.state.client.aclose()
            logger.info("Application shutdown...")

    app = FastAPI(title=settings.app_name, version=settings.version, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.client = None

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Last added runs first: logging wraps metrics wraps the origin guard
    app.add_middleware(OriginGuardMiddleware, settings=settings)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(LoggingMiddleware)

    @app.get("/metrics")
    async def get_metrics():
        return await metrics()

    @app.get("/health", response_model=HealthCheck)
    async def health():
        components = {
            "fetch": "ok",
            "chat": "ok" if settings.openai_api_key else "degraded",
        }
        return HealthCheck(status="ok", components=components, version=settings.version)

    @app.get("/fetch")
    async def fetch(
        request: Request,
        client: AsyncClient = Depends(get_client),
        relay_settings: AppSettings = Depends(get_settings),
    ):
        return await relay_fetch(client, request.query_params.get("url"), relay_settings)

    @app.post("/openai/chat")
    async def openai_chat(
        request: Request,
        client: AsyncClient = Depends(get_client),
        relay_settings: AppSettings = Depends(get_settings),
    ):
        body = await read_limited_body(request, relay_settings.chat_max_body_bytes)
        return await relay_chat(client, body, request.headers.get("authorization"), relay_settings)

    return app
