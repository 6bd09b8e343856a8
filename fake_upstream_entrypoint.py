"""Fake chat upstream entrypoint.

Configures logging, creates the fake FastAPI app, and starts the server.
Point RELAY_CHAT_UPSTREAM_URL at http://<host>:<port>/v1/chat/completions.
"""

from cors_relay.mock.fake_chat_server import create_fake_app
from cors_relay.core.config import settings
from cors_relay.core.logging_config import setup_logging

# Configure logging
logger = setup_logging().bind(module=__name__)

# Create FastAPI application
app = create_fake_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on {settings.fake_upstream_host}:{settings.fake_upstream_port}")
    uvicorn.run(
        "fake_upstream_entrypoint:app",
        host=settings.fake_upstream_host,
        port=settings.fake_upstream_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
