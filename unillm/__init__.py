"""Normalized chat, completion and embedding layer over LLM vendor APIs."""

from unillm.errors import (
    AuthError,
    HttpError,
    InvalidRequestError,
    LLMError,
    ResponseError,
    ResponseFormatError,
    TransportError,
    UnsupportedError,
)
from unillm.models.chat import ChatMessage, ChatRole, ImageMime
from unillm.models.completion import CompletionRequest, CompletionResponse
from unillm.models.tools import FunctionCall, StructuredOutputFormat, Tool, ToolCall
from unillm.providers.base import ChatResponse, LLMProvider

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "ChatMessage",
    "ChatResponse",
    "ChatRole",
    "CompletionRequest",
    "CompletionResponse",
    "FunctionCall",
    "HttpError",
    "ImageMime",
    "InvalidRequestError",
    "LLMError",
    "LLMProvider",
    "ResponseError",
    "ResponseFormatError",
    "StructuredOutputFormat",
    "Tool",
    "ToolCall",
    "TransportError",
    "UnsupportedError",
    "__version__",
]
