"""OpenAI client factory for the chat orchestrator, with optional LangSmith tracing."""

import os

import structlog
from openai import AsyncOpenAI

from eventav.config import get_settings

logger = structlog.get_logger(__name__)


def tracing_enabled() -> bool:
    """LangSmith tracing switch, read from the environment where LangSmith reads it."""
    return os.getenv("LANGCHAIN_TRACING_V2", "").lower() == "true"


def get_openai_client(api_key: str | None = None) -> AsyncOpenAI:
    """
    Create the AsyncOpenAI client shared by every chat request.

    When tracing is enabled the client is wrapped with wrap_openai, so each
    completion of a function-calling round trip becomes its own traced run.

    Args:
        api_key: OpenAI API key. Defaults to settings.openai_api_key.
    """
    client = AsyncOpenAI(api_key=api_key or get_settings().openai_api_key)

    traced = tracing_enabled()
    if traced:
        from langsmith.wrappers import wrap_openai

        client = wrap_openai(client)

    logger.info("openai_client_created", traced=traced)
    return client
