"""Capability interfaces for LLM backends."""

from unillm.providers.base import (
    ChatProvider,
    ChatResponse,
    CompletionProvider,
    EmbeddingProvider,
    LLMProvider,
)

__all__ = [
    "ChatProvider",
    "ChatResponse",
    "CompletionProvider",
    "EmbeddingProvider",
    "LLMProvider",
]
