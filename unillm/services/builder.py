"""Builder for assembling provider handles from staged settings.

Setters only record values. Everything is checked once in ``LLMBuilder.build``,
which returns an ``LLMProvider`` so callers never depend on a concrete backend.
"""

import json
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import httpx
from pydantic import ValidationError

from unillm.clients.xai import XAI_API_KEY_ENV, XAIClient, XAIConfig
from unillm.errors import InvalidRequestError
from unillm.models.chat import ReasoningEffort
from unillm.models.tools import FunctionTool, ParameterProperty, ParametersSchema, StructuredOutputFormat, Tool
from unillm.providers.base import LLMProvider
from unillm.utils.logging import get_logger

logger = get_logger(__name__)


class LLMBackend(StrEnum):
    """Backends that can be built."""

    XAI = "xai"

    @classmethod
    def parse(cls, value: str) -> "LLMBackend":
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise InvalidRequestError(f"Unknown LLM backend: {value}") from e


class ParamBuilder:
    """Fluent builder for one function parameter."""

    def __init__(self, name: str):
        self.name = name
        self._type = "string"
        self._description = ""
        self._items: ParameterProperty | None = None
        self._enum: list[str] | None = None

    def type_(self, property_type: str) -> "ParamBuilder":
        self._type = property_type
        return self

    def description(self, description: str) -> "ParamBuilder":
        self._description = description
        return self

    def items(self, item: "ParamBuilder") -> "ParamBuilder":
        """Element type for array parameters."""
        self._items = item.build()
        return self

    def enum_values(self, values: list[str]) -> "ParamBuilder":
        self._enum = list(values)
        return self

    def build(self) -> ParameterProperty:
        return ParameterProperty(
            property_type=self._type,
            description=self._description,
            items=self._items,
            enum_list=self._enum,
        )


class FunctionBuilder:
    """Fluent builder for a function tool."""

    def __init__(self, name: str):
        self.name = name
        self._description = ""
        self._params: list[ParamBuilder] = []
        self._required: list[str] = []

    def description(self, description: str) -> "FunctionBuilder":
        self._description = description
        return self

    def param(self, param: ParamBuilder) -> "FunctionBuilder":
        self._params.append(param)
        return self

    def required(self, names: list[str]) -> "FunctionBuilder":
        self._required = list(names)
        return self

    def build(self) -> Tool:
        parameters = ParametersSchema(
            properties={param.name: param.build() for param in self._params},
            required=self._required,
        )
        return Tool(function=FunctionTool(name=self.name, description=self._description, parameters=parameters))


class LLMBuilder:
    """Staged configuration for an LLM provider."""

    def __init__(self) -> None:
        self._backend: LLMBackend | None = None
        self._api_key: str | None = None
        self._base_url: str | None = None
        self._model: str | None = None
        self._max_tokens: int | None = None
        self._temperature: float | None = None
        self._system: str | None = None
        self._timeout_seconds: float | None = None
        self._stream: bool | None = None
        self._top_p: float | None = None
        self._top_k: int | None = None
        self._reasoning_effort: ReasoningEffort | None = None
        self._embedding_encoding_format: str | None = None
        self._embedding_dimensions: int | None = None
        self._json_schema: StructuredOutputFormat | dict[str, Any] | str | None = None
        self._tools: list[Tool] = []
        self._http_client: httpx.AsyncClient | None = None

    def backend(self, backend: LLMBackend | str) -> "LLMBuilder":
        self._backend = backend if isinstance(backend, LLMBackend) else LLMBackend.parse(backend)
        return self

    def api_key(self, api_key: str) -> "LLMBuilder":
        self._api_key = api_key
        return self

    def base_url(self, base_url: str) -> "LLMBuilder":
        self._base_url = base_url.rstrip("/")
        return self

    def model(self, model: str) -> "LLMBuilder":
        self._model = model
        return self

    def max_tokens(self, max_tokens: int) -> "LLMBuilder":
        self._max_tokens = max_tokens
        return self

    def temperature(self, temperature: float) -> "LLMBuilder":
        self._temperature = temperature
        return self

    def system(self, system: str) -> "LLMBuilder":
        self._system = system
        return self

    def timeout_seconds(self, timeout_seconds: float) -> "LLMBuilder":
        self._timeout_seconds = timeout_seconds
        return self

    def stream(self, stream: bool) -> "LLMBuilder":
        self._stream = stream
        return self

    def top_p(self, top_p: float) -> "LLMBuilder":
        self._top_p = top_p
        return self

    def top_k(self, top_k: int) -> "LLMBuilder":
        self._top_k = top_k
        return self

    def reasoning_effort(self, effort: ReasoningEffort | str) -> "LLMBuilder":
        try:
            self._reasoning_effort = ReasoningEffort(effort)
        except ValueError as e:
            raise InvalidRequestError(f"Unknown reasoning effort: {effort}") from e
        return self

    def embedding_encoding_format(self, encoding_format: str) -> "LLMBuilder":
        self._embedding_encoding_format = encoding_format
        return self

    def embedding_dimensions(self, dimensions: int) -> "LLMBuilder":
        self._embedding_dimensions = dimensions
        return self

    def schema(self, schema: StructuredOutputFormat | dict[str, Any] | str) -> "LLMBuilder":
        """Structured output format, as a model, a parsed dict or a JSON document."""
        self._json_schema = schema
        return self

    def function(self, function: FunctionBuilder | Tool) -> "LLMBuilder":
        self._tools.append(function.build() if isinstance(function, FunctionBuilder) else function)
        return self

    def http_client(self, client: httpx.AsyncClient) -> "LLMBuilder":
        """Share an existing HTTP client instead of creating one per provider."""
        self._http_client = client
        return self

    def _resolve_schema(self) -> StructuredOutputFormat | None:
        raw = self._json_schema
        if raw is None or isinstance(raw, StructuredOutputFormat):
            return raw
        try:
            if isinstance(raw, str):
                return StructuredOutputFormat.model_validate_json(raw)
            return StructuredOutputFormat.model_validate(raw)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid structured output format: {e}") from e

    def _validate(self) -> None:
        if self._backend is None:
            raise InvalidRequestError("No backend specified")
        if self._max_tokens is not None and self._max_tokens <= 0:
            raise InvalidRequestError("max_tokens must be positive")
        if self._temperature is not None and self._temperature < 0:
            raise InvalidRequestError("temperature must not be negative")
        if self._top_p is not None and not 0 < self._top_p <= 1:
            raise InvalidRequestError("top_p must be in (0, 1]")
        if self._timeout_seconds is not None and self._timeout_seconds <= 0:
            raise InvalidRequestError("timeout_seconds must be positive")

    def _build_xai(self) -> LLMProvider:
        config = XAIConfig(
            **{
                key: value
                for key, value in {
                    "model": self._model,
                    "max_tokens": self._max_tokens,
                    "temperature": self._temperature,
                    "system": self._system,
                    "timeout_seconds": self._timeout_seconds,
                    "stream": self._stream,
                    "top_p": self._top_p,
                    "top_k": self._top_k,
                    "reasoning_effort": self._reasoning_effort,
                    "embedding_encoding_format": self._embedding_encoding_format,
                    "embedding_dimensions": self._embedding_dimensions,
                    "json_schema": self._resolve_schema(),
                    "tools": tuple(self._tools) if self._tools else None,
                    "base_url": self._base_url,
                }.items()
                if value is not None
            }
        )
        if self._api_key is None:
            logger.debug(f"No api key set, falling back to {XAI_API_KEY_ENV}")
        return XAIClient(api_key=self._api_key, config=config, http_client=self._http_client)

    def build(self) -> LLMProvider:
        """Validate the collected settings and build the provider."""
        self._validate()
        factory = _BACKEND_FACTORIES.get(self._backend)  # type: ignore[arg-type]
        if factory is None:
            raise InvalidRequestError(f"Backend {self._backend} is not available")
        provider = factory(self)
        logger.info(f"Built {self._backend} provider")
        return provider


_BACKEND_FACTORIES: dict[LLMBackend, Callable[[LLMBuilder], LLMProvider]] = {
    LLMBackend.XAI: LLMBuilder._build_xai,
}


def parse_model_spec(spec: str) -> tuple[LLMBackend, str | None]:
    """Split ``"backend:model"`` (model optional) into its parts."""
    backend, _, model = spec.partition(":")
    return LLMBackend.parse(backend), model or None


def schema_from_file(path: str) -> StructuredOutputFormat:
    """Load a structured output format from a JSON file."""
    try:
        with open(path, encoding="utf-8") as handle:
            return StructuredOutputFormat.model_validate(json.load(handle))
    except (json.JSONDecodeError, ValidationError) as e:
        raise InvalidRequestError(f"Invalid structured output format in {path}: {e}") from e
