from cors_relay.core.logging_config import setup_logging
from cors_relay.core.security import redact_headers
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import time

logger = setup_logging()

class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """Log request and response metadata.

        Bodies are left alone: /fetch responses are streamed and must not be
        buffered here.
        """
        start_time = time.time()

        log_data = {
            "method": request.method,
            "path": request.url.path,
            # keys only; the /fetch target url may embed credentials
            "query_keys": list(request.query_params.keys()),
        }
        if logger.isEnabledFor(logging.DEBUG):
            log_data["headers"] = redact_headers(dict(request.headers))

        logger.info("Incoming Request", **log_data)

        response = await call_next(request)

        process_time = time.time() - start_time
        response_log = {
            "status_code": response.status_code,
            "content_type": response.headers.get("content-type"),
            "process_time": f"{process_time:.4f}s",
        }
        if logger.isEnabledFor(logging.DEBUG):
            response_log["headers"] = redact_headers(dict(response.headers))

        logger.info("Outgoing Response", **response_log)

        return response
