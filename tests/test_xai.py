"""Tests for the X.AI backend client."""

import asyncio
import base64
import json

import httpx
import pytest

from unillm.clients.xai import XAIChatResponse, XAIClient, XAIConfig
from unillm.errors import AuthError, HttpError, ResponseError, ResponseFormatError, UnsupportedError
from unillm.models.chat import ChatMessage, ImageMime, ReasoningEffort
from unillm.models.completion import CompletionRequest
from unillm.models.tools import FunctionTool, StructuredOutputFormat, Tool


class RecordingTransport:
    """Mock transport that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, payload: object | None = None, content: bytes | None = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"choices": [{"message": {"content": "Hello!"}}]}
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


def make_client(transport: RecordingTransport, api_key: str = "test-key", **config) -> XAIClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    return XAIClient(api_key=api_key, config=XAIConfig(**config), http_client=http_client)


def hi() -> list[ChatMessage]:
    return [ChatMessage.user().content("Hi").build()]


class TestAuth:
    """Tests for credential checks before network calls."""

    def test_empty_key_fails_every_capability_without_network(self):
        """Test that chat, embed and complete raise AuthError and send nothing."""
        transport = RecordingTransport()
        client = make_client(transport, api_key="")

        with pytest.raises(AuthError):
            asyncio.run(client.chat(hi()))
        with pytest.raises(AuthError):
            asyncio.run(client.chat_with_tools(hi(), None))
        with pytest.raises(AuthError):
            asyncio.run(client.embed(["a"]))
        with pytest.raises(AuthError):
            asyncio.run(client.complete(CompletionRequest(prompt="x")))

        assert transport.calls == 0

    def test_key_read_from_environment(self, monkeypatch):
        """Test that the API key falls back to XAI_API_KEY."""
        monkeypatch.setenv("XAI_API_KEY", "env-key")
        assert XAIClient().api_key == "env-key"

    def test_bearer_header_sent(self):
        """Test that requests carry the bearer token."""
        transport = RecordingTransport()
        asyncio.run(make_client(transport).chat(hi()))
        assert transport.requests[0].headers["Authorization"] == "Bearer test-key"
        assert str(transport.requests[0].url) == "https://api.x.ai/v1/chat/completions"


class TestChatRequest:
    """Tests for chat request serialization."""

    def test_minimal_request(self):
        """Test the body for a single user message without options."""
        transport = RecordingTransport()
        asyncio.run(make_client(transport).chat(hi()))

        body = transport.last_body()
        assert body == {
            "model": "grok-2-latest",
            "messages": [{"role": "user", "content": "Hi"}],
            "stream": False,
        }
        assert "response_format" not in body

    def test_optional_fields_included_when_set(self):
        """Test that configured sampling options are sent."""
        transport = RecordingTransport()
        client = make_client(transport, model="grok-beta", max_tokens=64, temperature=0.2, top_p=0.9, top_k=40)
        asyncio.run(client.chat(hi()))

        body = transport.last_body()
        assert body["model"] == "grok-beta"
        assert body["max_tokens"] == 64
        assert body["temperature"] == 0.2
        assert body["top_p"] == 0.9
        assert body["top_k"] == 40

    def test_reasoning_effort_sent_when_set(self):
        """Test that reasoning effort is sent only when configured."""
        transport = RecordingTransport()
        asyncio.run(make_client(transport, reasoning_effort=ReasoningEffort.LOW).chat(hi()))
        asyncio.run(make_client(transport).chat(hi()))

        assert json.loads(transport.requests[0].content)["reasoning_effort"] == "low"
        assert "reasoning_effort" not in transport.last_body()

    def test_configured_timeout_overrides_client_timeout(self):
        """Test that a configured timeout is applied to each request."""
        transport = RecordingTransport()
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport), timeout=11.0)
        client = XAIClient(api_key="k", config=XAIConfig(timeout_seconds=7), http_client=http_client)
        asyncio.run(client.chat(hi()))

        assert transport.requests[0].extensions["timeout"] == {"connect": 7, "read": 7, "write": 7, "pool": 7}

    def test_client_timeout_used_when_unconfigured(self):
        """Test that the HTTP client timeout applies when none is configured."""
        transport = RecordingTransport()
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport), timeout=11.0)
        asyncio.run(XAIClient(api_key="k", http_client=http_client).chat(hi()))

        assert transport.requests[0].extensions["timeout"] == {
            "connect": 11.0,
            "read": 11.0,
            "write": 11.0,
            "pool": 11.0,
        }

    def test_system_prompt_prepended(self):
        """Test that the system prompt becomes the first message."""
        transport = RecordingTransport()
        client = make_client(transport, system="Be brief.")
        messages = [
            ChatMessage.user().content("Hi").build(),
            ChatMessage.assistant().content("Hello").build(),
        ]
        asyncio.run(client.chat(messages))

        assert transport.last_body()["messages"] == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
        ]

    def test_structured_output_envelope(self):
        """Test that the schema is wrapped in a json_schema response format verbatim."""
        schema = {
            "type": "object",
            "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
            "required": ["name", "age"],
        }
        transport = RecordingTransport()
        client = make_client(transport, json_schema=StructuredOutputFormat(name="Student", schema=schema))
        asyncio.run(client.chat(hi()))

        assert transport.last_body()["response_format"] == {
            "type": "json_schema",
            "json_schema": {"name": "Student", "schema": schema},
        }

    def test_image_url_message(self):
        """Test that image URLs become a content array."""
        transport = RecordingTransport()
        message = ChatMessage.user().content("What is this?").image_url("https://example.com/a.png").build()
        asyncio.run(make_client(transport).chat([message]))

        assert transport.last_body()["messages"][0]["content"] == [
            {"type": "text", "text": "What is this?"},
            {"type": "image_url", "image_url": {"url": "https://example.com/a.png"}},
        ]

    def test_inline_image_sent_as_data_url(self):
        """Test that raw image bytes are base64 encoded into a data URL."""
        transport = RecordingTransport()
        message = ChatMessage.user().image(ImageMime.PNG, b"png-bytes").build()
        asyncio.run(make_client(transport).chat([message]))

        content = transport.last_body()["messages"][0]["content"]
        expected = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode("ascii")
        assert content == [{"type": "image_url", "image_url": {"url": expected}}]

    def test_pdf_unsupported(self):
        """Test that PDF attachments are rejected before sending."""
        transport = RecordingTransport()
        message = ChatMessage.user().pdf(b"%PDF").build()
        with pytest.raises(UnsupportedError):
            asyncio.run(make_client(transport).chat([message]))
        assert transport.calls == 0

    def test_tools_sent(self):
        """Test that tools passed to the call are serialized."""
        transport = RecordingTransport()
        tool = Tool(function=FunctionTool(name="lookup", description="Look something up"))
        asyncio.run(make_client(transport).chat_with_tools(hi(), [tool]))

        assert transport.last_body()["tools"] == [
            {
                "type": "function",
                "function": {
                    "name": "lookup",
                    "description": "Look something up",
                    "parameters": {"type": "object", "properties": {}, "required": []},
                },
            }
        ]

    def test_configured_tools_used_by_chat(self):
        """Test that chat falls back to tools configured on the client."""
        transport = RecordingTransport()
        tool = Tool(function=FunctionTool(name="lookup", description="Look something up"))
        client = make_client(transport, tools=(tool,))
        asyncio.run(client.chat(hi()))

        assert client.tools == [tool]
        assert transport.last_body()["tools"][0]["function"]["name"] == "lookup"


class TestChatResponse:
    """Tests for chat response handling."""

    def test_text_from_first_choice(self):
        """Test that text reads the first choice."""
        transport = RecordingTransport(
            payload={"choices": [{"message": {"content": "first"}}, {"message": {"content": "second"}}]}
        )
        response = asyncio.run(make_client(transport).chat(hi()))
        assert response.text() == "first"
        assert str(response) == "first"
        assert response.tool_calls() is None
        assert response.thinking() is None

    def test_empty_choices(self):
        """Test that an empty choices list yields no text."""
        transport = RecordingTransport(payload={"choices": []})
        response = asyncio.run(make_client(transport).chat(hi()))
        assert response.text() is None
        assert str(response) == ""

    def test_tool_calls_parsed(self):
        """Test that vendor tool calls are exposed."""
        transport = RecordingTransport(
            payload={
                "choices": [
                    {
                        "message": {
                            "content": None,
                            "tool_calls": [
                                {
                                    "id": "call_1",
                                    "type": "function",
                                    "function": {"name": "lookup", "arguments": '{"q": "weather"}'},
                                }
                            ],
                        }
                    }
                ]
            }
        )
        response = asyncio.run(make_client(transport).chat(hi()))

        calls = response.tool_calls()
        assert response.text() is None
        assert calls is not None and len(calls) == 1
        assert calls[0].id == "call_1"
        assert calls[0].function.name == "lookup"
        assert calls[0].function.arguments == '{"q": "weather"}'

    def test_reasoning_content_as_thinking(self):
        """Test that reasoning content is exposed as thinking."""
        transport = RecordingTransport(
            payload={"choices": [{"message": {"content": "42", "reasoning_content": "6 * 7"}}]}
        )
        response = asyncio.run(make_client(transport).chat(hi()))
        assert response.thinking() == "6 * 7"

    def test_response_model_rejects_missing_choices(self):
        """Test decoding a body without choices fails validation."""
        with pytest.raises(ValueError):
            XAIChatResponse.model_validate({"id": "x"})


class TestChatErrors:
    """Tests for error propagation."""

    def test_non_success_status(self):
        """Test that non-2xx statuses raise ResponseError without retrying."""
        transport = RecordingTransport(status_code=429, payload={"error": "rate limited"})
        with pytest.raises(ResponseError) as exc_info:
            asyncio.run(make_client(transport).chat(hi()))

        assert exc_info.value.status_code == 429
        assert "rate limited" in exc_info.value.detail
        assert transport.calls == 1

    def test_malformed_body(self):
        """Test that an unexpected body raises ResponseFormatError."""
        transport = RecordingTransport(content=b"not json")
        with pytest.raises(ResponseFormatError) as exc_info:
            asyncio.run(make_client(transport).chat(hi()))
        assert exc_info.value.raw_response == "not json"

    def test_network_failure(self):
        """Test that transport exceptions become HttpError."""

        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = XAIClient(api_key="k", http_client=httpx.AsyncClient(transport=httpx.MockTransport(fail)))
        with pytest.raises(HttpError, match="connection refused"):
            asyncio.run(client.chat(hi()))


class TestCompletion:
    """Tests for the completion placeholder."""

    def test_placeholder_without_network(self):
        """Test that completion returns the fixed placeholder and sends nothing."""
        transport = RecordingTransport()
        response = asyncio.run(make_client(transport).complete(CompletionRequest(prompt="Hello")))
        assert response.text == "X.AI completion not implemented."
        assert transport.calls == 0


class TestEmbedding:
    """Tests for embeddings."""

    def test_vectors_in_input_order(self):
        """Test that one vector per input comes back in order."""
        transport = RecordingTransport(
            payload={"data": [{"embedding": [0.1, 0.2, 0.3]}, {"embedding": [0.4, 0.5, 0.6]}]}
        )
        vectors = asyncio.run(make_client(transport, model="v1").embed(["a", "b"]))

        assert vectors == [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]]
        assert all(len(vector) == 3 for vector in vectors)
        assert str(transport.requests[0].url) == "https://api.x.ai/v1/embeddings"
        assert transport.last_body() == {"model": "v1", "input": ["a", "b"], "encoding_format": "float"}

    def test_encoding_format_and_dimensions(self):
        """Test that configured embedding options are sent."""
        transport = RecordingTransport(payload={"data": [{"embedding": [1.0, 2.0]}]})
        client = make_client(transport, embedding_encoding_format="base64", embedding_dimensions=2)
        asyncio.run(client.embed(["a"]))

        body = transport.last_body()
        assert body["encoding_format"] == "base64"
        assert body["dimensions"] == 2

    def test_malformed_embedding_body(self):
        """Test that a missing data field raises ResponseFormatError."""
        transport = RecordingTransport(payload={"object": "list"})
        with pytest.raises(ResponseFormatError):
            asyncio.run(make_client(transport).embed(["a"]))


class TestConcurrency:
    """Tests for sharing one client across concurrent calls."""

    def test_concurrent_calls_share_client(self):
        """Test that concurrent chats on one client are independent."""
        transport = RecordingTransport()
        client = make_client(transport)

        async def run_case():
            return await asyncio.gather(*(client.chat(hi()) for _ in range(5)))

        responses = asyncio.run(run_case())
        assert [response.text() for response in responses] == ["Hello!"] * 5
        assert transport.calls == 5
