"""Adapters backed by LangChain chat models (Anthropic and Gemini)."""

import logging
import time
from collections.abc import Callable
from typing import ClassVar

from langchain_core.language_models.chat_models import BaseChatModel

from ai_router.constants import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, ProviderName
from ai_router.infra.runtime import create_anthropic_chat_model, create_gemini_chat_model
from ai_router.message_mappers import build_langchain_messages, message_text
from ai_router.provider_registry import PROVIDER_SPECS
from ai_router.schemas import ChatRequest, ChatResponse

from .base import build_assistant_response, require_api_key, require_conversation

logger = logging.getLogger(__name__)

ChatModelFactory = Callable[..., BaseChatModel]


class LangChainChatAdapter:
    """Adapter that sends the conversation through a LangChain chat model.

    Subclasses pick the provider name and the chat model factory. The chat
    model is built per call from the captured configuration, so an adapter
    instance can be shared between concurrent requests.
    """

    name: ClassVar[ProviderName]
    default_chat_model_factory: ClassVar[ChatModelFactory]

    def __init__(
        self,
        *,
        model: str,
        system_prompt: str,
        api_key: str | None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        chat_model_factory: ChatModelFactory | None = None,
    ) -> None:
        self.model = model
        self._system_prompt = system_prompt
        self._api_key = api_key
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._chat_model_factory = chat_model_factory or type(self).default_chat_model_factory

    async def chat(self, request: ChatRequest) -> ChatResponse:
        api_key = require_api_key(self._api_key, PROVIDER_SPECS[self.name].api_key_env_var)

        require_conversation(request)
        lc_messages = build_langchain_messages(request.messages, self._system_prompt)

        chat_model = self._chat_model_factory(
            model=self.model,
            api_key=api_key,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        start = time.time()
        response = await chat_model.ainvoke(
            lc_messages,
            config={
                "run_name": f"ai_router_{self.name}_chat",
                "tags": ["ai-router", self.name, self.model],
                "metadata": {"app_id": request.app_id, "message_count": len(request.messages)},
            },
        )
        duration_ms = int((time.time() - start) * 1000)

        content = message_text(response.content)
        usage = getattr(response, "usage_metadata", None)

        logger.info(
            "Provider response generated",
            extra={
                "provider": self.name,
                "provider_duration_ms": duration_ms,
                "model": self.model,
                "usage_prompt_tokens": usage.get("input_tokens") if usage else None,
                "usage_completion_tokens": usage.get("output_tokens") if usage else None,
                "response_length": len(content),
                "app_id": request.app_id,
            },
        )
        return build_assistant_response(content, provider=self.name, model=self.model)


class AnthropicChatAdapter(LangChainChatAdapter):
    name = "anthropic"
    default_chat_model_factory = staticmethod(create_anthropic_chat_model)


class GeminiChatAdapter(LangChainChatAdapter):
    """Gemini adapter; assistant turns reach the backend under its ``model`` role."""

    name = "gemini"
    default_chat_model_factory = staticmethod(create_gemini_chat_model)
