import pytest
from contextlib import ExitStack
from unittest.mock import patch

import httpx
from starlette.testclient import TestClient

from cors_relay.core.config import AppSettings


def make_settings(**overrides) -> AppSettings:
    """Settings isolated from the developer's environment and .env file."""
    values = {"openai_api_key": None}
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


class UpstreamRecorder:
    """httpx.MockTransport handler that records every outbound request."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def called(self) -> bool:
        return bool(self.requests)


@pytest.fixture
def relay_client():
    """Factory returning a TestClient whose upstream is an httpx.MockTransport."""
    stack = ExitStack()

    def _make(handler=None, **overrides):
        from cors_relay.core.app import create_app

        upstream = UpstreamRecorder(handler)
        mock_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
        stack.enter_context(patch("cors_relay.core.app.create_async_client", return_value=mock_client))
        app = create_app(make_settings(**overrides))
        client = stack.enter_context(TestClient(app, raise_server_exceptions=False))
        return client, upstream

    yield _make
    stack.close()
