"""Capability interfaces and the response contract every backend satisfies."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from unillm.models.chat import ChatMessage
from unillm.models.completion import CompletionRequest, CompletionResponse
from unillm.models.tools import Tool, ToolCall


class ChatResponse(ABC):
    """Backend-produced chat result.

    Concrete responses are created by adapters from a single HTTP reply and are
    not modified afterwards.
    """

    @abstractmethod
    def text(self) -> str | None:
        """Generated text, if any."""

    @abstractmethod
    def tool_calls(self) -> list[ToolCall] | None:
        """Tool calls requested by the model, if any."""

    def thinking(self) -> str | None:
        """Reasoning trace, for backends that expose one."""
        return None

    def __str__(self) -> str:
        return self.text() or ""


class ChatProvider(ABC):
    """Chat-style interactions."""

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatResponse:
        """Send a conversation without tools."""
        return await self.chat_with_tools(messages, None)

    @abstractmethod
    async def chat_with_tools(self, messages: Sequence[ChatMessage], tools: Sequence[Tool] | None) -> ChatResponse:
        """Send a conversation, optionally advertising tools to the model."""


class CompletionProvider(ABC):
    """Single-prompt text completion."""

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Complete the given prompt."""


class EmbeddingProvider(ABC):
    """Vector embeddings."""

    @abstractmethod
    async def embed(self, inputs: Sequence[str]) -> list[list[float]]:
        """Return one embedding per input string, in input order."""


class LLMProvider(ChatProvider, CompletionProvider, EmbeddingProvider):
    """Combined capability handle returned to callers.

    A backend only becomes instantiable once it implements chat, completion and
    embedding; there are no silent no-op defaults.
    """

    @property
    def tools(self) -> list[Tool] | None:
        """Tools configured on the provider."""
        return None

    async def aclose(self) -> None:
        """Release transport resources owned by the provider."""
