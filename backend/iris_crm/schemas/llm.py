"""
LLM gateway request/response schemas.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

LLMProvider = Literal["openrouter", "gemini"]


class LLMRequest(BaseModel):
    """Request body for POST /llm/request: forwarded as-is to the provider endpoint."""
    endpoint: str = Field(..., description="Provider path, e.g. /chat/completions")
    method: Literal["GET", "POST", "PUT", "DELETE"] = "POST"
    service: LLMProvider = "openrouter"
    headers: dict[str, str] = {}
    body: dict[str, Any] | None = None

    @field_validator("endpoint")
    @classmethod
    def relative_path(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("/") or "://" in v:
            raise ValueError("endpoint must be a path starting with '/'")
        return v


class LLMResponse(BaseModel):
    service: LLMProvider
    data: Any = None
