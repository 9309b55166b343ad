"""X.AI API client implementing chat, completion and embedding capabilities."""

import base64
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from unillm.errors import AuthError, HttpError, ResponseError, ResponseFormatError, UnsupportedError
from unillm.models.chat import ChatMessage, ChatRole, ImageType, ImageURLType, PdfType, ReasoningEffort
from unillm.models.completion import CompletionRequest, CompletionResponse
from unillm.models.tools import StructuredOutputFormat, Tool, ToolCall
from unillm.providers.base import ChatResponse, LLMProvider
from unillm.utils.logging import get_logger

logger = get_logger(__name__)

XAI_BASE_URL = "https://api.x.ai/v1"
XAI_API_KEY_ENV = "XAI_API_KEY"
DEFAULT_MODEL = "grok-2-latest"
DEFAULT_EMBEDDING_ENCODING_FORMAT = "float"

_ROLE_NAMES: dict[ChatRole, Literal["user", "assistant"]] = {
    ChatRole.USER: "user",
    ChatRole.ASSISTANT: "assistant",
}


class XAIChatMessage(BaseModel):
    """Message format for X.AI chat API."""

    role: Literal["user", "assistant", "system"]
    content: str | list[dict[str, Any]]


class XAIChatMsg(BaseModel):
    """Message inside a chat choice."""

    content: str | None = None
    tool_calls: list[ToolCall] | None = None
    reasoning_content: str | None = None


class XAIChatChoice(BaseModel):
    """Single chat choice."""

    message: XAIChatMsg


class XAIChatResponse(ChatResponse, BaseModel):
    """Chat response returned by X.AI."""

    model_config = ConfigDict(frozen=True)

    choices: list[XAIChatChoice]

    def text(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].message.content

    def tool_calls(self) -> list[ToolCall] | None:
        if not self.choices:
            return None
        return self.choices[0].message.tool_calls or None

    def thinking(self) -> str | None:
        if not self.choices:
            return None
        return self.choices[0].message.reasoning_content


class XAIEmbeddingData(BaseModel):
    embedding: list[float]


class XAIEmbeddingResponse(BaseModel):
    data: list[XAIEmbeddingData]


@dataclass(frozen=True)
class XAIConfig:
    """Configuration for X.AI API client."""

    model: str = DEFAULT_MODEL
    max_tokens: int | None = None
    temperature: float | None = None
    system: str | None = None
    timeout_seconds: float | None = None
    stream: bool | None = None
    top_p: float | None = None
    top_k: int | None = None
    reasoning_effort: ReasoningEffort | None = None

    embedding_encoding_format: str | None = None
    embedding_dimensions: int | None = None

    json_schema: StructuredOutputFormat | None = None
    tools: tuple[Tool, ...] | None = None
    base_url: str = XAI_BASE_URL


def _drop_unset(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _error_detail(response: httpx.Response) -> str:
    return response.text[:600]


class XAIClient(LLMProvider):
    """X.AI backend.

    Configuration is fixed at construction. The HTTP client is created once and
    shared by all calls, so one instance can serve concurrent requests.
    """

    api_key: str
    config: XAIConfig
    client: httpx.AsyncClient

    def __init__(
        self,
        api_key: str | None = None,
        config: XAIConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize X.AI client.

        Args:
            api_key: X.AI API key (defaults to XAI_API_KEY env var). An empty key
                is accepted here and reported as AuthError on first use.
            config: Client configuration
            http_client: Pre-built HTTP client; left open by aclose()
        """
        self.api_key = api_key if api_key is not None else os.getenv(XAI_API_KEY_ENV, "")
        self.config = config or XAIConfig()

        self._owns_client = http_client is None
        if http_client is None:
            timeout = httpx.Timeout(self.config.timeout_seconds) if self.config.timeout_seconds else None
            http_client = httpx.AsyncClient(timeout=timeout)
        self.client = http_client

    @property
    def tools(self) -> list[Tool] | None:
        return list(self.config.tools) if self.config.tools else None

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "XAIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _require_api_key(self) -> None:
        if not self.api_key:
            raise AuthError("Missing X.AI API key")

    def _convert_message(self, message: ChatMessage) -> XAIChatMessage:
        """Map a normalized message onto the X.AI message shape."""
        role = _ROLE_NAMES[message.role]
        attachment = message.message_type

        if isinstance(attachment, ImageURLType):
            url = attachment.url
        elif isinstance(attachment, ImageType):
            encoded = base64.b64encode(attachment.data).decode("ascii")
            url = f"data:{attachment.mime.mime_type};base64,{encoded}"
        elif isinstance(attachment, PdfType):
            raise UnsupportedError("X.AI chat does not accept PDF attachments")
        else:
            return XAIChatMessage(role=role, content=message.content)

        parts: list[dict[str, Any]] = []
        if message.content:
            parts.append({"type": "text", "text": message.content})
        parts.append({"type": "image_url", "image_url": {"url": url}})
        return XAIChatMessage(role=role, content=parts)

    def build_chat_request(self, messages: Sequence[ChatMessage], tools: Sequence[Tool] | None = None) -> dict[str, Any]:
        """Build the JSON body for the chat completions endpoint.

        Unset optional fields are left out rather than sent as null.
        """
        xai_messages = [self._convert_message(message) for message in messages]
        if self.config.system:
            xai_messages.insert(0, XAIChatMessage(role="system", content=self.config.system))

        # No local checks on the schema; X.AI rejects unsupported schemas itself.
        response_format = None
        if self.config.json_schema is not None:
            response_format = {"type": "json_schema", "json_schema": self.config.json_schema.to_wire()}

        active_tools = tools if tools is not None else self.config.tools
        tool_dicts = [tool.to_wire() for tool in active_tools] if active_tools else None

        return _drop_unset(
            {
                "model": self.config.model,
                "messages": [message.model_dump() for message in xai_messages],
                "max_tokens": self.config.max_tokens,
                "temperature": self.config.temperature,
                "stream": bool(self.config.stream),
                "top_p": self.config.top_p,
                "top_k": self.config.top_k,
                "reasoning_effort": self.config.reasoning_effort.value if self.config.reasoning_effort else None,
                "response_format": response_format,
                "tools": tool_dicts,
            }
        )

    def build_embedding_request(self, inputs: Sequence[str]) -> dict[str, Any]:
        """Build the JSON body for the embeddings endpoint."""
        return _drop_unset(
            {
                "model": self.config.model,
                "input": list(inputs),
                "encoding_format": self.config.embedding_encoding_format or DEFAULT_EMBEDDING_ENCODING_FORMAT,
                "dimensions": self.config.embedding_dimensions,
            }
        )

    async def _post_json(self, path: str, body: dict[str, Any]) -> httpx.Response:
        """POST a JSON body with bearer auth. Single attempt, no retry."""
        url = f"{self.config.base_url}{path}"
        timeout = self.config.timeout_seconds if self.config.timeout_seconds else httpx.USE_CLIENT_DEFAULT

        logger.debug(f"POST {url} model={body.get('model')}")
        try:
            response = await self.client.post(
                url,
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=timeout,
            )
        except httpx.HTTPError as e:
            detail = str(e).strip() or "connection_failed_or_timeout"
            logger.warning(f"X.AI request to {url} failed: {detail}")
            raise HttpError(detail) from e

        if not response.is_success:
            logger.warning(f"X.AI returned HTTP {response.status_code} for {url}")
            raise ResponseError(response.status_code, _error_detail(response))

        logger.debug(f"X.AI responded {response.status_code} for {url}")
        return response

    async def chat_with_tools(self, messages: Sequence[ChatMessage], tools: Sequence[Tool] | None) -> ChatResponse:
        """Send a chat request to X.AI.

        Args:
            messages: Conversation history
            tools: Tools to advertise; falls back to the configured tools

        Returns:
            Parsed X.AI chat response
        """
        self._require_api_key()
        body = self.build_chat_request(messages, tools)

        logger.debug(f"Creating chat with {len(body['messages'])} messages, {len(body.get('tools', []))} tools")
        response = await self._post_json("/chat/completions", body)

        try:
            return XAIChatResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ResponseFormatError(f"Unexpected X.AI chat response: {e}", response.text) from e

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Completion is not wired to X.AI; returns a fixed placeholder without a network call."""
        self._require_api_key()
        logger.warning("X.AI completion is not implemented, returning placeholder response")
        return CompletionResponse(text="X.AI completion not implemented.")

    async def embed(self, inputs: Sequence[str]) -> list[list[float]]:
        """Embed each input string, preserving order."""
        self._require_api_key()
        body = self.build_embedding_request(inputs)

        response = await self._post_json("/embeddings", body)

        try:
            parsed = XAIEmbeddingResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ResponseFormatError(f"Unexpected X.AI embedding response: {e}", response.text) from e

        return [item.embedding for item in parsed.data]
