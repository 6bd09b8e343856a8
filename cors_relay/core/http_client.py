from httpx import AsyncClient, Limits, Timeout

from cors_relay.core.config import AppSettings


def create_async_client(settings: AppSettings) -> AsyncClient:
    """Build the upstream client shared by both relays for the app's lifetime."""
    return AsyncClient(
        timeout=Timeout(
            connect=settings.upstream_connect_timeout,
            read=settings.upstream_read_timeout,
            write=settings.upstream_write_timeout,
            pool=settings.upstream_pool_timeout,
        ),
        limits=Limits(
            max_connections=settings.max_connections,
            max_keepalive_connections=settings.max_keepalive_connections,
        ),
    )
