"""Shared constants and literal types for the AI chat router."""

from typing import Literal

AI_APP_ID = "dvo88-ria-command-center"
LANGSMITH_PROJECT = "ria-command-center-ai"

NO_RESPONSE_PLACEHOLDER = "[No response]"
DEFAULT_TEMPERATURE = 0.4
DEFAULT_MAX_TOKENS = 600

DEFAULT_CHAT_OVERALL_TIMEOUT_MS = 25_000
DEFAULT_PROVIDER_HEALTH_TIMEOUT_MS = 10_000
DEFAULT_PROVIDER_HEALTH_CACHE_MS = 45_000

ProviderName = Literal["gemini", "openai", "anthropic"]
ChatContext = Literal["vendors", "projects"]
OrchestratorName = Literal["direct", "langgraph"]

# Router tries this order and falls back on errors/timeouts.
AI_PROVIDER_ORDER: tuple[ProviderName, ...] = ("anthropic", "openai", "gemini")
PROVIDER_HEALTH_ORDER: tuple[ProviderName, ...] = ("openai", "anthropic", "gemini")

LOCAL_PROVIDER_NAME = "local"
LOCAL_PROVIDER_MODEL = "static-context"

AI_PERSONA_SYSTEM_PROMPT = """
You are an expert RIA technology consultant.

Guiding principles:
1. Non-custodial orientation (assets remain at custodians like Fidelity/Schwab).
2. Anti-bloat (prefer simpler, more stable systems).
3. API-first integrations over fragile screen scraping.
4. Prioritize practical, decision-ready recommendations.

Response style:
- Keep responses concise and executive-friendly.
- Tie recommendations to weighted priorities when provided.
- Be explicit about tradeoffs and implementation risk.
""".strip()
