"""AI chat router API using FastAPI + Mangum for AWS Lambda."""

import logging
from functools import lru_cache

from fastapi import APIRouter, FastAPI, HTTPException
from mangum import Mangum

from ai_router.config import get_settings
from ai_router.errors import (
    AiRouterError,
    AllProvidersFailedError,
    BadRequestError,
    ProviderConfigurationError,
    ProviderTimeoutError,
)
from ai_router.infra.runtime import ensure_langsmith_configured, flush_langsmith_traces
from ai_router.project_context import load_projects
from ai_router.schemas import ChatApiRequest, ChatApiResponse, ProviderHealthSnapshot
from ai_router.services.chat_service import ChatService
from ai_router.services.provider_health import ProviderHealthService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    settings = get_settings()
    return ChatService(
        settings.router_factory_config(),
        overall_timeout_ms=settings.ai_chat_overall_timeout_ms,
        load_projects=lambda: load_projects(settings.ai_projects_file),
    )


@lru_cache(maxsize=1)
def get_provider_health_service() -> ProviderHealthService:
    settings = get_settings()
    return ProviderHealthService(
        settings.router_factory_config(),
        probe_timeout_ms=settings.ai_provider_health_timeout_ms,
        cache_ttl_ms=settings.ai_provider_health_cache_ms,
    )


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/ai/providers/health", response_model=ProviderHealthSnapshot)
async def provider_health(refresh: bool = False) -> ProviderHealthSnapshot:
    """Report which AI providers are configured and answering."""
    return await get_provider_health_service().get_snapshot(force_refresh=refresh)


@router.post("/ai/chat", response_model=ChatApiResponse)
async def chat(request: ChatApiRequest) -> ChatApiResponse:
    """Route the conversation to the first AI provider that answers."""
    ensure_langsmith_configured()
    try:
        return await get_chat_service().handle_chat(request)
    except (BadRequestError, ProviderConfigurationError) as e:
        logger.warning("Invalid chat request", extra={"error": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProviderTimeoutError as e:
        logger.error("Chat request exceeded overall deadline", extra={"error": str(e)})
        raise HTTPException(status_code=504, detail=str(e)) from e
    except AllProvidersFailedError as e:
        # Per-provider detail stays in the logs.
        logger.error(
            "All AI providers failed",
            extra={"failed_providers": [name for name, _ in e.failures]},
        )
        raise HTTPException(status_code=502, detail=str(e)) from e
    except AiRouterError as e:
        logger.exception("AI routing failed")
        raise HTTPException(status_code=502, detail="AI routing failed") from e
    finally:
        flush_langsmith_traces()


app.include_router(router)


handler = Mangum(app)
