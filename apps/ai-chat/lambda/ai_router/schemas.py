"""Pydantic schemas for the AI chat router and its HTTP API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import ChatContext, ProviderName

Role = Literal["system", "user", "assistant", "tool"]
HealthStatus = Literal["green", "red"]


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    name: str | None = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    app_id: str = Field(alias="appId")
    messages: tuple[ChatMessage, ...] = Field(min_length=1)


class ChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: ChatMessage
    provider: str | None = None
    model: str | None = None

    @field_validator("message")
    @classmethod
    def validate_assistant_message(cls, message: ChatMessage) -> ChatMessage:
        if message.role != "assistant":
            raise ValueError("ChatResponse.message must have role 'assistant'")
        return message


class ApiChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(min_length=1)


class ChatApiRequest(BaseModel):
    messages: list[ApiChatMessage] = Field(min_length=1)
    provider: ProviderName | None = None
    context: ChatContext | None = None

    def to_chat_request(self, app_id: str) -> ChatRequest:
        return ChatRequest(
            app_id=app_id,
            messages=tuple(
                ChatMessage(role=message.role, content=message.content)
                for message in self.messages
            ),
        )


class ChatApiResponse(BaseModel):
    ok: bool = True
    response: ChatResponse


class ProviderHealth(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: ProviderName
    display_name: str = Field(alias="displayName")
    env_var: str = Field(alias="envVar")
    configured: bool
    is_live: bool = Field(alias="isLive")
    status: HealthStatus
    reason: str
    model: str
    latency_ms: int | None = Field(default=None, alias="latencyMs")
    checked_at: str = Field(alias="checkedAt")


class ProviderHealthSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: HealthStatus
    checked_at: str = Field(alias="checkedAt")
    cache_ttl_ms: int = Field(alias="cacheTtlMs")
    providers: dict[str, ProviderHealth]
