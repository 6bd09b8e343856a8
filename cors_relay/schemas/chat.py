from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    # name, tool_calls etc. ride along untouched
    model_config = ConfigDict(extra="allow")

    role: str
    # Plain text or a list of content parts
    content: Any = None


class ChatRequest(BaseModel):
    """Chat completion request as sent by the browser.

    Omitted tuning fields are filled from server defaults before forwarding;
    any other top-level field is dropped.
    """
    model: str | None = None
    messages: list[ChatMessage] = Field(..., min_length=1)
    max_tokens: int | None = None
    temperature: float | None = None
