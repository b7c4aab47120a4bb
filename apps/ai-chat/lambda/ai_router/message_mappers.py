"""Conversion helpers between router messages and provider-specific formats."""

from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from .schemas import ChatMessage

# Caller system prompts are replaced by the adapter's own; tool turns carry no
# tool-call context in this API and are not forwarded.
FORWARDED_ROLES = frozenset({"user", "assistant"})


def conversation_turns(messages: Sequence[ChatMessage]) -> list[ChatMessage]:
    return [message for message in messages if message.role in FORWARDED_ROLES]


def build_openai_messages(
    messages: Sequence[ChatMessage],
    system_prompt: str | None,
) -> list[dict[str, str]]:
    """Build Chat Completions messages with the adapter system prompt first."""
    openai_messages: list[dict[str, str]] = []
    if system_prompt:
        openai_messages.append({"role": "system", "content": system_prompt})

    for message in conversation_turns(messages):
        openai_messages.append({"role": message.role, "content": message.content})

    return openai_messages


def build_langchain_messages(
    messages: Sequence[ChatMessage],
    system_prompt: str | None,
) -> list[SystemMessage | HumanMessage | AIMessage]:
    """Convert router messages to LangChain message format for chat models."""
    lc_messages: list[SystemMessage | HumanMessage | AIMessage] = []

    if system_prompt:
        lc_messages.append(SystemMessage(content=system_prompt))

    for message in conversation_turns(messages):
        if message.role == "assistant":
            lc_messages.append(AIMessage(content=message.content))
        else:
            lc_messages.append(HumanMessage(content=message.content))

    return lc_messages


def message_text(content: Any) -> str:
    """Flatten chat model content (plain string or content blocks) to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return str(content)
