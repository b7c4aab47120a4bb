"""Provider adapter interface and shared response helpers."""

from typing import Protocol, runtime_checkable

from ai_router.constants import NO_RESPONSE_PLACEHOLDER
from ai_router.errors import BadRequestError, ProviderConfigurationError
from ai_router.message_mappers import conversation_turns
from ai_router.schemas import ChatMessage, ChatRequest, ChatResponse


@runtime_checkable
class ProviderAdapter(Protocol):
    name: str

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a normalized chat request to one backend and return its reply."""
        ...


def require_api_key(api_key: str | None, env_var: str) -> str:
    if not api_key:
        raise ProviderConfigurationError(f"{env_var} is not configured")
    return api_key


def require_conversation(request: ChatRequest) -> None:
    if not conversation_turns(request.messages):
        raise BadRequestError("At least one user or assistant message is required")


def build_assistant_response(content: str | None, *, provider: str, model: str) -> ChatResponse:
    return ChatResponse(
        message=ChatMessage(role="assistant", content=content or NO_RESPONSE_PLACEHOLDER),
        provider=provider,
        model=model,
    )
