"""Router factory: provider selection policy and system-prompt composition.

Everything here is a pure function of ``RouterFactoryConfig``; reading the
environment happens once in ``AiSettings.router_factory_config``.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from .constants import (
    AI_PERSONA_SYSTEM_PROMPT,
    AI_PROVIDER_ORDER,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    LOCAL_PROVIDER_NAME,
    OrchestratorName,
    ProviderName,
)
from .errors import ProviderConfigurationError
from .orchestration.base import RouterOptions
from .orchestration.direct import ProviderRouter
from .orchestration.langgraph_flow import LangGraphProviderRouter
from .provider_registry import PROVIDER_SPECS
from .providers.base import ProviderAdapter
from .providers.langchain_provider import AnthropicChatAdapter, GeminiChatAdapter
from .providers.local_provider import LocalContextAdapter
from .providers.openai_provider import OpenAIChatAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    name: ProviderName
    api_key: str | None
    model: str
    timeout_ms: float | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class RouterFactoryConfig:
    providers: Mapping[ProviderName, ProviderConfig] = field(default_factory=dict)
    order: tuple[ProviderName, ...] = AI_PROVIDER_ORDER
    debug: bool = True
    local_fallback: bool = False
    orchestrator: OrchestratorName = "direct"
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    def provider(self, name: ProviderName) -> ProviderConfig:
        """Return the configuration for ``name``; unlisted providers are unconfigured."""
        configured = self.providers.get(name)
        if configured is not None:
            return configured
        spec = PROVIDER_SPECS[name]
        return ProviderConfig(
            name=name,
            api_key=None,
            model=spec.default_model,
            timeout_ms=spec.default_timeout_ms,
        )


AdapterBuilder = Callable[[ProviderConfig, str, RouterFactoryConfig], ProviderAdapter]


def _build_openai(
    provider: ProviderConfig, system_prompt: str, config: RouterFactoryConfig
) -> ProviderAdapter:
    return OpenAIChatAdapter(
        model=provider.model,
        system_prompt=system_prompt,
        api_key=provider.api_key,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def _build_anthropic(
    provider: ProviderConfig, system_prompt: str, config: RouterFactoryConfig
) -> ProviderAdapter:
    return AnthropicChatAdapter(
        model=provider.model,
        system_prompt=system_prompt,
        api_key=provider.api_key,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def _build_gemini(
    provider: ProviderConfig, system_prompt: str, config: RouterFactoryConfig
) -> ProviderAdapter:
    return GeminiChatAdapter(
        model=provider.model,
        system_prompt=system_prompt,
        api_key=provider.api_key,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


ADAPTER_BUILDERS: dict[ProviderName, AdapterBuilder] = {
    "gemini": _build_gemini,
    "openai": _build_openai,
    "anthropic": _build_anthropic,
}


def compose_system_prompt(
    base: str = AI_PERSONA_SYSTEM_PROMPT, extra: str | None = None
) -> str:
    if extra and extra.strip():
        return f"{base}\n\n{extra}"
    return base


def select_providers(
    config: RouterFactoryConfig, force_provider: str | None = None
) -> list[str]:
    """Decide which providers to route to, in order.

    A forced provider must exist and be configured. Otherwise the configured
    providers are kept in preferred order; when none is configured the local
    static-context adapter is used if enabled, else the full preferred order
    (each of those adapters then fails fast on its missing credential).
    """
    if force_provider is not None:
        if force_provider not in PROVIDER_SPECS:
            raise ProviderConfigurationError(f"Unknown provider: {force_provider}")
        if not config.provider(force_provider).configured:
            env_var = PROVIDER_SPECS[force_provider].api_key_env_var
            raise ProviderConfigurationError(
                f"{env_var} is not configured; cannot force provider {force_provider}"
            )
        return [force_provider]

    selected: list[str] = [name for name in config.order if config.provider(name).configured]
    if selected:
        return selected

    if config.local_fallback:
        logger.warning("No AI provider configured; using local static-context fallback")
        return [LOCAL_PROVIDER_NAME]

    logger.warning("No AI provider configured; routing to all providers in preferred order")
    return list(config.order)


def build_adapters(
    config: RouterFactoryConfig,
    names: Sequence[str],
    system_prompt: str,
    *,
    context: str | None = None,
    adapter_builders: Mapping[str, AdapterBuilder] | None = None,
) -> list[ProviderAdapter]:
    builders = adapter_builders or ADAPTER_BUILDERS
    adapters: list[ProviderAdapter] = []
    for name in names:
        if name == LOCAL_PROVIDER_NAME:
            adapters.append(LocalContextAdapter(context=context))
            continue
        adapters.append(builders[name](config.provider(name), system_prompt, config))
    return adapters


def create_ai_router(
    config: RouterFactoryConfig,
    *,
    force_provider: str | None = None,
    system_prompt_extra: str | None = None,
    system_prompt_override: str | None = None,
    adapter_builders: Mapping[str, AdapterBuilder] | None = None,
) -> ProviderRouter | LangGraphProviderRouter:
    system_prompt = system_prompt_override or compose_system_prompt(extra=system_prompt_extra)
    names = select_providers(config, force_provider)
    adapters = build_adapters(
        config,
        names,
        system_prompt,
        context=system_prompt_extra,
        adapter_builders=adapter_builders,
    )

    provider_timeout_ms: dict[str, float] = {}
    for name in names:
        if name == LOCAL_PROVIDER_NAME:
            continue
        timeout_ms = config.provider(name).timeout_ms
        if timeout_ms is not None:
            provider_timeout_ms[name] = timeout_ms
    options = RouterOptions(provider_timeout_ms=provider_timeout_ms, debug=config.debug)

    logger.info(
        "AI router created",
        extra={"providers": names, "orchestrator": config.orchestrator},
    )
    if config.orchestrator == "langgraph":
        return LangGraphProviderRouter(adapters, options)
    return ProviderRouter(adapters, options)
