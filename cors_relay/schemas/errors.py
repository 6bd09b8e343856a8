from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by the relay itself (never used for upstream payloads)."""
    error: str = Field(..., description="Short, caller-safe error message")
