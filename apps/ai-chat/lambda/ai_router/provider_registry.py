"""Provider registry: credentials, default models and timeouts per backend."""

from dataclasses import dataclass

from .constants import ProviderName


@dataclass(frozen=True)
class ProviderSpec:
    name: ProviderName
    display_name: str
    api_key_env_var: str
    model_env_var: str
    timeout_env_var: str
    default_model: str
    default_timeout_ms: int


PROVIDER_SPECS: dict[ProviderName, ProviderSpec] = {
    "gemini": ProviderSpec(
        name="gemini",
        display_name="Gemini",
        api_key_env_var="GEMINI_API_KEY",
        model_env_var="GEMINI_MODEL",
        timeout_env_var="AI_TIMEOUT_GEMINI_MS",
        default_model="gemini-2.5-flash",
        default_timeout_ms=8000,
    ),
    "openai": ProviderSpec(
        name="openai",
        display_name="OpenAI",
        api_key_env_var="OPENAI_API_KEY",
        model_env_var="OPENAI_MODEL",
        timeout_env_var="AI_TIMEOUT_OPENAI_MS",
        default_model="gpt-4o-mini",
        default_timeout_ms=9000,
    ),
    "anthropic": ProviderSpec(
        name="anthropic",
        display_name="Anthropic",
        api_key_env_var="ANTHROPIC_API_KEY",
        model_env_var="ANTHROPIC_MODEL",
        timeout_env_var="AI_TIMEOUT_ANTHROPIC_MS",
        default_model="claude-3-haiku-20240307",
        default_timeout_ms=9000,
    ),
}
SUPPORTED_PROVIDERS = set(PROVIDER_SPECS)
