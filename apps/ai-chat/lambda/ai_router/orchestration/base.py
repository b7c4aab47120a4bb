"""Shared routing options and per-attempt helpers for provider routers."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from ai_router.errors import AiRouterError
from ai_router.providers.base import ProviderAdapter
from ai_router.schemas import ChatRequest, ChatResponse
from ai_router.timeouts import with_timeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouterOptions:
    per_provider_timeout_ms: float | None = None
    provider_timeout_ms: Mapping[str, float] = field(default_factory=dict)
    debug: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "provider_timeout_ms", MappingProxyType(dict(self.provider_timeout_ms))
        )

    def timeout_for(self, adapter_name: str) -> float | None:
        """Per-adapter override first, then the shared default; ``None`` means no timeout."""
        timeout_ms = self.provider_timeout_ms.get(adapter_name)
        if timeout_ms is not None:
            return timeout_ms
        return self.per_provider_timeout_ms


def validate_adapters(adapters: Sequence[ProviderAdapter]) -> tuple[ProviderAdapter, ...]:
    ordered = tuple(adapters)
    if not ordered:
        raise AiRouterError("ProviderRouter requires at least one provider")

    seen: set[str] = set()
    for adapter in ordered:
        if adapter.name in seen:
            raise AiRouterError(f"Duplicate provider name in router: {adapter.name}")
        seen.add(adapter.name)
    return ordered


async def attempt_adapter(
    adapter: ProviderAdapter, request: ChatRequest, options: RouterOptions
) -> ChatResponse:
    response = await with_timeout(
        adapter.chat(request),
        options.timeout_for(adapter.name),
        f"provider:{adapter.name}",
    )
    # Provenance comes from the router, never from the adapter's own report.
    return response.model_copy(update={"provider": adapter.name})


def report_failure(adapter: ProviderAdapter, error: Exception, options: RouterOptions) -> None:
    if not options.debug:
        return
    logger.warning(
        "provider failed: %s: %s",
        adapter.name,
        error,
        extra={"provider": adapter.name, "error_type": type(error).__name__},
    )
