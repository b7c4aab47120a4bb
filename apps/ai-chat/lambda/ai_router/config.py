"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    AI_PROVIDER_ORDER,
    DEFAULT_CHAT_OVERALL_TIMEOUT_MS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_PROVIDER_HEALTH_CACHE_MS,
    DEFAULT_PROVIDER_HEALTH_TIMEOUT_MS,
    DEFAULT_TEMPERATURE,
    OrchestratorName,
    ProviderName,
)
from .provider_registry import PROVIDER_SPECS

if TYPE_CHECKING:
    from .router_factory import RouterFactoryConfig


class AiSettings(BaseSettings):
    """Router settings loaded from environment variables (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider credentials; presence decides which adapters are routed to.
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    gemini_model: str = PROVIDER_SPECS["gemini"].default_model
    openai_model: str = PROVIDER_SPECS["openai"].default_model
    anthropic_model: str = PROVIDER_SPECS["anthropic"].default_model

    ai_timeout_gemini_ms: float = PROVIDER_SPECS["gemini"].default_timeout_ms
    ai_timeout_openai_ms: float = PROVIDER_SPECS["openai"].default_timeout_ms
    ai_timeout_anthropic_ms: float = PROVIDER_SPECS["anthropic"].default_timeout_ms

    ai_chat_overall_timeout_ms: float = DEFAULT_CHAT_OVERALL_TIMEOUT_MS
    ai_provider_health_timeout_ms: float = DEFAULT_PROVIDER_HEALTH_TIMEOUT_MS
    ai_provider_health_cache_ms: int = DEFAULT_PROVIDER_HEALTH_CACHE_MS

    ai_temperature: float = DEFAULT_TEMPERATURE
    ai_max_tokens: int = DEFAULT_MAX_TOKENS

    ai_router_debug: bool = True
    ai_local_fallback: bool = False  # answer from static context when nothing is configured
    ai_orchestrator: OrchestratorName = "direct"

    ai_projects_file: Path | None = None

    langsmith_api_key: str | None = None

    def api_key_for(self, provider: ProviderName) -> str:
        return {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }[provider]

    def provider_model(self, provider: ProviderName) -> str:
        return {
            "gemini": self.gemini_model,
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
        }[provider]

    def timeout_ms_for(self, provider: ProviderName) -> float:
        return {
            "gemini": self.ai_timeout_gemini_ms,
            "openai": self.ai_timeout_openai_ms,
            "anthropic": self.ai_timeout_anthropic_ms,
        }[provider]

    def is_configured(self, provider: ProviderName) -> bool:
        return bool(self.api_key_for(provider))

    def router_factory_config(self) -> "RouterFactoryConfig":
        from .router_factory import ProviderConfig, RouterFactoryConfig

        return RouterFactoryConfig(
            providers={
                name: ProviderConfig(
                    name=name,
                    api_key=self.api_key_for(name) or None,
                    model=self.provider_model(name),
                    timeout_ms=self.timeout_ms_for(name),
                )
                for name in PROVIDER_SPECS
            },
            order=AI_PROVIDER_ORDER,
            debug=self.ai_router_debug,
            local_fallback=self.ai_local_fallback,
            orchestrator=self.ai_orchestrator,
            temperature=self.ai_temperature,
            max_tokens=self.ai_max_tokens,
        )


@lru_cache(maxsize=1)
def get_settings() -> AiSettings:
    return AiSettings()
