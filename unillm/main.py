"""Main FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from unillm import __version__
from unillm.api.endpoints import close_http_client, router
from unillm.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    yield
    await close_http_client()


app = FastAPI(
    title="unillm",
    description="Normalized chat, completion and embedding access to LLM vendor APIs.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    tags_metadata=[
        {
            "name": "Chat",
            "description": "Chat with a configured backend. Credentials are read from the server environment.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("unillm.main:app", host="0.0.0.0", port=8000, log_level="info")
