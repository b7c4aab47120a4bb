"""Cached liveness snapshot of every supported AI provider."""

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import UTC, datetime

from ai_router.constants import AI_APP_ID, PROVIDER_HEALTH_ORDER, ProviderName
from ai_router.provider_registry import PROVIDER_SPECS
from ai_router.router_factory import (
    ADAPTER_BUILDERS,
    AdapterBuilder,
    RouterFactoryConfig,
)
from ai_router.schemas import (
    ChatMessage,
    ChatRequest,
    ProviderHealth,
    ProviderHealthSnapshot,
)
from ai_router.timeouts import with_timeout

logger = logging.getLogger(__name__)

HEALTH_CHECK_PROMPT = "health check"


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class ProviderHealthService:
    """Probe each provider with a minimal chat and cache the combined result.

    Concurrent callers share one in-flight computation. ``force_refresh``
    skips the cache but still joins a computation that is already running.
    """

    def __init__(
        self,
        factory_config: RouterFactoryConfig,
        *,
        probe_timeout_ms: float | None,
        cache_ttl_ms: int,
        adapter_builders: Mapping[str, AdapterBuilder] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        # Probes only need one token back.
        self._factory_config = replace(factory_config, max_tokens=1, temperature=0.0)
        self._probe_timeout_ms = probe_timeout_ms
        self._cache_ttl_ms = cache_ttl_ms
        self._adapter_builders = adapter_builders or ADAPTER_BUILDERS
        self._clock = clock
        self._cached: ProviderHealthSnapshot | None = None
        self._expires_at = 0.0
        self._in_flight: asyncio.Task[ProviderHealthSnapshot] | None = None

    async def _probe(self, name: ProviderName) -> None:
        adapter = self._adapter_builders[name](
            self._factory_config.provider(name), HEALTH_CHECK_PROMPT, self._factory_config
        )
        request = ChatRequest(
            app_id=AI_APP_ID,
            messages=(ChatMessage(role="user", content=HEALTH_CHECK_PROMPT),),
        )
        await with_timeout(
            adapter.chat(request),
            self._probe_timeout_ms,
            f"{PROVIDER_SPECS[name].display_name} probe",
        )

    async def _check_provider(self, name: ProviderName) -> ProviderHealth:
        spec = PROVIDER_SPECS[name]
        provider = self._factory_config.provider(name)
        checked_at = _now_iso()

        if not provider.configured:
            return ProviderHealth(
                provider=name,
                display_name=spec.display_name,
                env_var=spec.api_key_env_var,
                configured=False,
                is_live=False,
                status="red",
                reason=f"Missing {spec.api_key_env_var}",
                model=provider.model,
                checked_at=checked_at,
            )

        started = time.monotonic()
        try:
            await self._probe(name)
        except Exception as error:
            logger.warning(
                "Provider health probe failed",
                extra={"provider": name, "error": str(error)},
            )
            is_live, reason = False, str(error) or type(error).__name__
        else:
            is_live, reason = True, "Connection live"

        return ProviderHealth(
            provider=name,
            display_name=spec.display_name,
            env_var=spec.api_key_env_var,
            configured=True,
            is_live=is_live,
            status="green" if is_live else "red",
            reason=reason,
            model=provider.model,
            latency_ms=int((time.monotonic() - started) * 1000),
            checked_at=checked_at,
        )

    async def _compute_snapshot(self) -> ProviderHealthSnapshot:
        checked_at = _now_iso()
        checks = await asyncio.gather(
            *(self._check_provider(name) for name in PROVIDER_HEALTH_ORDER)
        )
        any_failing = any(check.status == "red" for check in checks)
        return ProviderHealthSnapshot(
            status="red" if any_failing else "green",
            checked_at=checked_at,
            cache_ttl_ms=self._cache_ttl_ms,
            providers={check.provider: check for check in checks},
        )

    async def _refresh(self) -> ProviderHealthSnapshot:
        try:
            snapshot = await self._compute_snapshot()
            self._cached = snapshot
            self._expires_at = self._clock() + self._cache_ttl_ms / 1000
            return snapshot
        finally:
            self._in_flight = None

    async def get_snapshot(self, force_refresh: bool = False) -> ProviderHealthSnapshot:
        if not force_refresh and self._cached is not None and self._clock() < self._expires_at:
            return self._cached

        if self._in_flight is None:
            self._in_flight = asyncio.ensure_future(self._refresh())
        return await asyncio.shield(self._in_flight)
