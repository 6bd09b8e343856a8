from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from cors_relay.core.config import AppSettings
from cors_relay.core.errors import error_response
from cors_relay.core.logging_config import setup_logging

logger = setup_logging()

ALLOWED_METHODS = "GET,POST,OPTIONS"


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Attach CORS headers for permitted origins and answer preflights with 204.

    Disallowed origins are not rejected server-side: their responses simply
    carry no CORS headers, and the browser blocks them.
    """

    def __init__(self, app: ASGIApp, settings: AppSettings):
        super().__init__(app)
        self.wildcard = settings.cors_mode == "wildcard"
        self.allowed_origins = frozenset(settings.allowed_origins)
        allowed_headers = ["Content-Type"]
        if settings.cors_allow_authorization:
            allowed_headers.append("Authorization")
        self.allowed_headers = ", ".join(allowed_headers)

    def cors_headers(self, origin: str | None) -> dict[str, str]:
        if self.wildcard:
            allow_origin = "*"
        elif origin and origin in self.allowed_origins:
            allow_origin = origin
        else:
            return {}

        headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": self.allowed_headers,
        }
        if not self.wildcard:
            headers["Vary"] = "Origin"
        return headers

    async def dispatch(self, request: Request, call_next):
        headers = self.cors_headers(request.headers.get("origin"))

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        try:
            response = await call_next(request)
        except Exception as e:
            # 500s still carry CORS headers
            logger.exception("Unhandled error", path=request.url.path, exception_type=type(e).__name__)
            response = error_response(500, "Internal server error")
        response.headers.update(headers)
        return response
