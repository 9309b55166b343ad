"""API endpoints exposing the provider layer over HTTP."""

from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends, HTTPException

from unillm import __version__
from unillm.errors import AuthError, InvalidRequestError, LLMError, UnsupportedError
from unillm.models.api import ChatRequest, ChatResponseBody, HealthResponse
from unillm.models.chat import ChatMessage, ChatMessageBuilder
from unillm.services.builder import LLMBuilder, parse_model_spec
from unillm.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Shared HTTP client so every request reuses one connection pool."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=None)
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def _to_messages(request: ChatRequest) -> list[ChatMessage]:
    return [ChatMessageBuilder(message.role).content(message.content).build() for message in request.messages]


@router.post("/v1/chat", response_model=ChatResponseBody, tags=["Chat"])
async def handle_chat(
    request: ChatRequest,
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ChatResponseBody:
    """Run a chat request against the backend named in ``model``."""
    try:
        backend, model = parse_model_spec(request.model)
        builder = LLMBuilder().backend(backend).http_client(http_client)
        if model:
            builder.model(model)
        if request.system:
            builder.system(request.system)
        if request.temperature is not None:
            builder.temperature(request.temperature)
        if request.max_tokens is not None:
            builder.max_tokens(request.max_tokens)
        provider = builder.build()

        logger.info(f"Chat request for {request.model} with {len(request.messages)} messages")
        response = await provider.chat(_to_messages(request))
    except AuthError as e:
        logger.warning(f"Chat rejected, missing credentials for {request.model}")
        raise HTTPException(status_code=401, detail=str(e)) from e
    except (InvalidRequestError, UnsupportedError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except LLMError as e:
        logger.error(f"Chat failed for {request.model}: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e

    return ChatResponseBody(model=request.model, response=response.text() or "")


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
