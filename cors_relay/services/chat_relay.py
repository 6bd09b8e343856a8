import json

from fastapi import Request
from fastapi.responses import Response
from httpx import AsyncClient, RequestError
from pydantic import ValidationError

from cors_relay.core.config import AppSettings
from cors_relay.core.errors import BadRequest, PayloadTooLarge, ProxyFailed, Unauthorized
from cors_relay.core.logging_config import setup_logging
from cors_relay.core.security import resolve_api_key
from cors_relay.schemas.chat import ChatRequest

logger = setup_logging()


async def read_limited_body(request: Request, max_bytes: int) -> bytes:
    """Read the request body, giving up as soon as it grows past *max_bytes*."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise PayloadTooLarge()
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise PayloadTooLarge()
    return bytes(body)


def parse_chat_request(body: bytes) -> ChatRequest:
    """Decode and validate the caller's JSON body."""
    try:
        data = json.loads(body) if body else {}
    except ValueError:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    if not data.get("messages"):
        raise BadRequest("messages must be a non-empty array")
    try:
        return ChatRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise BadRequest(f"Invalid field {location}: {first['msg']}")


def build_upstream_payload(chat: ChatRequest, settings: AppSettings) -> dict:
    """Merge the caller's tuning fields with server defaults."""
    return {
        "model": chat.model or settings.chat_default_model,
        "messages": [m.model_dump(exclude_unset=True) for m in chat.messages],
        "max_tokens": chat.max_tokens if chat.max_tokens is not None else settings.chat_default_max_tokens,
        "temperature": chat.temperature if chat.temperature is not None else settings.chat_default_temperature,
    }


async def relay_chat(client: AsyncClient, body: bytes, auth_header: str | None, settings: AppSettings) -> Response:
    """Forward a chat completion to the fixed upstream and pass its answer through unchanged."""
    api_key = resolve_api_key(auth_header, settings.openai_api_key)
    if not api_key:
        raise Unauthorized()

    chat = parse_chat_request(body)
    payload = build_upstream_payload(chat, settings)

    try:
        upstream = await client.post(
            settings.chat_upstream_url,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
        )
    except RequestError as e:
        logger.error(
            "Chat proxy failed",
            upstream_url=settings.chat_upstream_url,
            exception_type=type(e).__name__,
            exception=str(e),
        )
        raise ProxyFailed()

    if upstream.is_success:
        logger.info("Chat relayed", model=payload["model"], status_code=upstream.status_code)
    else:
        logger.warning("Chat upstream error relayed", model=payload["model"], status_code=upstream.status_code)

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type="application/json",
    )
