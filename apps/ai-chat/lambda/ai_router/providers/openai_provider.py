"""OpenAI adapter for routed chat requests."""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from openai import AsyncOpenAI

from ai_router.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from ai_router.infra.runtime import create_openai_client, invoke_openai_chat_completions
from ai_router.message_mappers import build_openai_messages
from ai_router.provider_registry import PROVIDER_SPECS
from ai_router.schemas import ChatRequest, ChatResponse

from .base import build_assistant_response, require_api_key, require_conversation

logger = logging.getLogger(__name__)


class OpenAIChatAdapter:
    name = "openai"

    def __init__(
        self,
        *,
        model: str,
        system_prompt: str,
        api_key: str | None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client_factory: Callable[[str], AsyncOpenAI] = create_openai_client,
        invoke: Callable[[AsyncOpenAI, dict[str, Any]], Awaitable[Any]] = (
            invoke_openai_chat_completions
        ),
    ) -> None:
        self.model = model
        self._system_prompt = system_prompt
        self._api_key = api_key
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client_factory = client_factory
        self._invoke = invoke

    async def chat(self, request: ChatRequest) -> ChatResponse:
        api_key = require_api_key(self._api_key, PROVIDER_SPECS["openai"].api_key_env_var)

        require_conversation(request)
        messages = build_openai_messages(request.messages, self._system_prompt)

        client = self._client_factory(api_key)
        start = time.time()
        completion = await self._invoke(
            client,
            {
                "model": self.model,
                "messages": messages,
                "temperature": self._temperature,
                "max_tokens": self._max_tokens,
            },
        )
        duration_ms = int((time.time() - start) * 1000)

        choices = completion.choices or []
        content = (choices[0].message.content if choices else None) or ""
        usage = completion.usage

        logger.info(
            "Provider response generated",
            extra={
                "provider": self.name,
                "openai_duration_ms": duration_ms,
                "model": self.model,
                "usage_prompt_tokens": usage.prompt_tokens if usage else None,
                "usage_completion_tokens": usage.completion_tokens if usage else None,
                "response_length": len(content),
                "app_id": request.app_id,
            },
        )
        return build_assistant_response(content, provider=self.name, model=self.model)
