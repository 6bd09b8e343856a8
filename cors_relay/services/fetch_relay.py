from httpx import AsyncClient, HTTPError, InvalidURL, RequestError, URL
from starlette.responses import StreamingResponse

from cors_relay.core.config import AppSettings
from cors_relay.core.errors import BadRequest, FetchFailed, UpstreamError
from cors_relay.core.logging_config import setup_logging
from cors_relay.core.security import redact_url
from cors_relay.services.streaming import cap_bytes

logger = setup_logging()

ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def validate_target_url(raw_url: str | None) -> URL:
    """Parse the ``url`` query parameter, accepting only absolute http/https URLs."""
    if not raw_url:
        raise BadRequest("Missing url parameter")
    try:
        url = URL(raw_url)
    except InvalidURL:
        raise BadRequest("Malformed url")

    if not url.scheme:
        raise BadRequest("Malformed url")
    if url.scheme not in ALLOWED_SCHEMES:
        raise BadRequest("Only http/https allowed")
    if not url.host:
        raise BadRequest("Malformed url")
    return url


async def relay_fetch(client: AsyncClient, raw_url: str | None, settings: AppSettings) -> StreamingResponse:
    """GET *raw_url* upstream and stream the body back, capped at ``fetch_max_bytes``.

    Caller headers are never forwarded; only the configured user agent is sent.
    The body is relayed still encoded, so the cap counts bytes on the wire.
    """
    url = validate_target_url(raw_url)
    log_url = redact_url(url)

    request = client.build_request("GET", url, headers={"User-Agent": settings.fetch_user_agent})
    try:
        upstream = await client.send(request, stream=True, follow_redirects=True)
    except RequestError as e:
        logger.warning("Fetch failed", target_url=log_url, exception_type=type(e).__name__)
        raise FetchFailed()

    if not upstream.is_success:
        await upstream.aclose()
        logger.info("Upstream returned non-success status", target_url=log_url, status_code=upstream.status_code)
        raise UpstreamError(upstream.status_code)

    content_type = upstream.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    headers = {"Content-Type": content_type, "Cache-Control": "no-store"}
    content_encoding = upstream.headers.get("content-encoding")
    if content_encoding:
        headers["Content-Encoding"] = content_encoding
    logger.info("Relaying fetch", target_url=log_url, status_code=upstream.status_code, content_type=content_type)

    async def body():
        try:
            async for chunk in cap_bytes(upstream.aiter_raw(), settings.fetch_max_bytes):
                yield chunk
        except HTTPError as e:
            # Headers are already sent, so the stream just ends early
            logger.warning("Upstream stream interrupted", target_url=log_url, exception_type=type(e).__name__)
        finally:
            await upstream.aclose()

    return StreamingResponse(body(), status_code=upstream.status_code, headers=headers)
