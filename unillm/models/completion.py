"""Text completion request/response models."""

from pydantic import BaseModel, ConfigDict


class CompletionRequest(BaseModel):
    """A single-prompt completion request."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    max_tokens: int | None = None
    temperature: float | None = None

    @classmethod
    def builder(cls, prompt: str) -> "CompletionRequestBuilder":
        return CompletionRequestBuilder(prompt)


class CompletionRequestBuilder:
    """Staged constructor for CompletionRequest."""

    def __init__(self, prompt: str):
        self.prompt = prompt
        self._max_tokens: int | None = None
        self._temperature: float | None = None

    def max_tokens(self, max_tokens: int) -> "CompletionRequestBuilder":
        self._max_tokens = max_tokens
        return self

    def temperature(self, temperature: float) -> "CompletionRequestBuilder":
        self._temperature = temperature
        return self

    def build(self) -> CompletionRequest:
        return CompletionRequest(prompt=self.prompt, max_tokens=self._max_tokens, temperature=self._temperature)


class CompletionResponse(BaseModel):
    """Completion result."""

    text: str

    def __str__(self) -> str:
        return self.text
