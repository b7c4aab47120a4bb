"""Runtime infrastructure helpers for SDK clients, chat models, and tracing."""

import logging
import os
from functools import lru_cache
from typing import Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI
from langsmith import traceable
from langsmith.run_trees import get_cached_client
from openai import AsyncOpenAI
from pydantic import SecretStr

from ai_router.config import get_settings
from ai_router.constants import LANGSMITH_PROJECT

logger = logging.getLogger(__name__)


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    _configure_langsmith(get_settings().langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


# Provider SDK retries are disabled: failover across providers is the router's job.


def create_openai_client(api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, max_retries=0)


@traceable(run_type="llm", name="openai.chat.completions.create")
async def invoke_openai_chat_completions(client: AsyncOpenAI, request_params: dict[str, Any]) -> Any:
    return await client.chat.completions.create(**request_params)


def create_anthropic_chat_model(
    *, model: str, api_key: str, temperature: float, max_tokens: int
) -> BaseChatModel:
    return ChatAnthropic(
        model=model,
        api_key=SecretStr(api_key),
        temperature=temperature,
        max_tokens=max_tokens,
        max_retries=0,
    )


def create_gemini_chat_model(
    *, model: str, api_key: str, temperature: float, max_tokens: int
) -> BaseChatModel:
    return ChatGoogleGenerativeAI(
        model=model,
        google_api_key=SecretStr(api_key),
        temperature=temperature,
        max_output_tokens=max_tokens,
        max_retries=0,
    )
