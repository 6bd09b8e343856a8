import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cors_relay.core.config import settings
from cors_relay.core.logging_config import setup_logging
from cors_relay.middlewares.logging_middleware import LoggingMiddleware

logger = setup_logging()


def _last_user_message(messages: list) -> str:
    for message in reversed(messages):
        if isinstance(message, dict) and message.get("role") == "user":
            content = message.get("content")
            return content if isinstance(content, str) else ""
    return ""


def create_fake_app() -> FastAPI:
    """Create a stand-in chat-completion API for local development."""
    app = FastAPI(title="Fake Chat Upstream", debug=settings.debug)

    app.add_middleware(LoggingMiddleware)

    @app.get("/status")
    async def status():
        return {"status": "Fake upstream is running"}

    # Chat Completions
    @app.post("/v1/chat/completions")
    async def chat(request: Request):
        if not request.headers.get("authorization", "").startswith("Bearer "):
            return JSONResponse(
                status_code=401,
                content={"error": {"message": "You didn't provide an API key.", "type": "invalid_request_error"}},
            )

        payload = await request.json()
        model = payload.get("model", "fake-model")
        reply = f"echo: {_last_user_message(payload.get('messages', []))}"
        return {
            "id": f"chatcmpl-{uuid.uuid4().hex[:12]}",
            "object": "chat.completion",
            "created": int(time.time()),
            "model": model,
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": reply},
                    "finish_reason": "stop",
                }
            ],
            "usage": {
                "prompt_tokens": 0,
                "completion_tokens": len(reply.split()),
                "total_tokens": len(reply.split()),
            },
        }

    return app
