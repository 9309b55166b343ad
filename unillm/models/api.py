"""Request/response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from unillm.models.chat import ChatRole


class ApiMessage(BaseModel):
    """Text message in an API chat request."""

    role: ChatRole
    content: str


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    model: str = Field(description='Backend and model as "backend:model", e.g. "xai:grok-2-latest"')
    messages: list[ApiMessage]
    system: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


class ChatResponseBody(BaseModel):
    """Response model for the chat endpoint."""

    model: str
    response: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: datetime
    version: str
