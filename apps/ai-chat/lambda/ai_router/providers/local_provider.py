"""No-network adapter used when no AI provider credentials are configured."""

from ai_router.constants import LOCAL_PROVIDER_MODEL, LOCAL_PROVIDER_NAME
from ai_router.provider_registry import PROVIDER_SPECS
from ai_router.schemas import ChatRequest, ChatResponse

from .base import build_assistant_response, require_conversation

OFFLINE_NOTICE = (
    "Live AI answers are unavailable because no AI provider is configured. "
    "Set one of {env_vars} to enable them."
)


class LocalContextAdapter:
    """Answers from static context instead of calling a backend.

    The reply is the offline notice, followed by the request-specific context
    (for example the project portfolio summary) when one was composed.
    """

    name = LOCAL_PROVIDER_NAME

    def __init__(self, *, context: str | None = None, model: str = LOCAL_PROVIDER_MODEL) -> None:
        self.model = model
        self._context = context

    async def chat(self, request: ChatRequest) -> ChatResponse:
        require_conversation(request)
        env_vars = ", ".join(spec.api_key_env_var for spec in PROVIDER_SPECS.values())
        content = OFFLINE_NOTICE.format(env_vars=env_vars)
        if self._context:
            content = f"{content}\n\nCurrent context:\n{self._context}"
        return build_assistant_response(content, provider=self.name, model=self.model)
