"""Application service for routed chat requests."""

import logging
import time
from collections.abc import Callable

from ai_router.constants import AI_APP_ID
from ai_router.project_context import ProjectSummary, build_project_system_prompt
from ai_router.providers.base import ProviderAdapter, require_conversation
from ai_router.router_factory import RouterFactoryConfig, create_ai_router
from ai_router.schemas import ChatApiRequest, ChatApiResponse
from ai_router.timeouts import with_timeout

logger = logging.getLogger(__name__)

CHAT_ROUTE_LABEL = "route:/api/ai/chat"

RouterBuilder = Callable[..., ProviderAdapter]


class ChatService:
    def __init__(
        self,
        factory_config: RouterFactoryConfig,
        *,
        overall_timeout_ms: float | None,
        load_projects: Callable[[], list[ProjectSummary]] = list,
        create_router: RouterBuilder = create_ai_router,
        app_id: str = AI_APP_ID,
    ) -> None:
        self._factory_config = factory_config
        self._overall_timeout_ms = overall_timeout_ms
        self._load_projects = load_projects
        self._create_router = create_router
        self._app_id = app_id

    def _system_prompt_extra(self, request: ChatApiRequest) -> str | None:
        if request.context != "projects":
            return None
        return build_project_system_prompt(self._load_projects())

    async def handle_chat(self, request: ChatApiRequest) -> ChatApiResponse:
        start = time.time()
        chat_request = request.to_chat_request(self._app_id)
        require_conversation(chat_request)
        logger.info(
            "Chat request received",
            extra={
                "message_count": len(chat_request.messages),
                "forced_provider": request.provider,
                "chat_context": request.context,
            },
        )

        router = self._create_router(
            self._factory_config,
            force_provider=request.provider,
            system_prompt_extra=self._system_prompt_extra(request),
        )
        # The overall deadline bounds the sum of every per-provider timeout.
        response = await with_timeout(
            router.chat(chat_request), self._overall_timeout_ms, CHAT_ROUTE_LABEL
        )

        logger.info(
            "Chat response routed",
            extra={
                "provider": response.provider or "unknown",
                "model": response.model or "unknown",
                "duration_ms": int((time.time() - start) * 1000),
                "response_length": len(response.message.content),
            },
        )
        return ChatApiResponse(response=response)
