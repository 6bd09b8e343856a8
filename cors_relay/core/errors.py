from fastapi import Request
from fastapi.responses import JSONResponse

from cors_relay.core.logging_config import setup_logging
from cors_relay.schemas.errors import ErrorResponse

logger = setup_logging()


class RelayError(Exception):
    """Base error for a single relayed request, rendered as ``{"error": message}``."""
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequest(RelayError):
    status_code = 400
    message = "Bad request"


class Unauthorized(RelayError):
    status_code = 401
    message = "Missing API key"


class PayloadTooLarge(RelayError):
    status_code = 413
    message = "Request body too large"


class UpstreamError(RelayError):
    """Upstream answered with a non-success status; that status is relayed as-is."""

    def __init__(self, status_code: int):
        super().__init__(f"Upstream {status_code}", status_code)


class FetchFailed(RelayError):
    status_code = 502
    message = "Fetch failed"


class ProxyFailed(RelayError):
    status_code = 502
    message = "openai proxy failed"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        content=ErrorResponse(error=message).model_dump(),
        status_code=status_code,
    )


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    logger.info("Relay error", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return error_response(exc.status_code, exc.message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, exception_type=type(exc).__name__)
    return error_response(500, "Internal server error")
