"""Adapters from LangChain agent output to `ToolCallResult` records."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from langchain_core.messages import ToolMessage

from chat_actions.agent.tool_calls import ToolCallResult


def tool_calls_from_messages(messages: Iterable[Any]) -> list[ToolCallResult]:
    """Collect tool results from a graph-runtime message list.

    Accepts LangChain `ToolMessage` objects and plain dicts with
    `role == "tool"` (OpenAI-style transcripts). Other messages are skipped.
    """

    results: list[ToolCallResult] = []
    for message in messages:
        if isinstance(message, ToolMessage):
            name = message.name or ""
            content: Any = message.content
        elif isinstance(message, dict) and message.get("role") == "tool":
            name = str(message.get("name") or "")
            content = message.get("content")
        else:
            continue
        if not name:
            continue
        results.append(ToolCallResult(name=name, payload=_content_payload(content)))
    return results


def tool_calls_from_steps(intermediate_steps: Iterable[Any]) -> list[ToolCallResult]:
    """Collect tool results from legacy `(AgentAction, observation)` pairs."""

    results: list[ToolCallResult] = []
    for step in intermediate_steps:
        if not isinstance(step, tuple) or len(step) != 2:
            continue
        action, observation = step
        tool_name = str(getattr(action, "tool", "") or "")
        if not tool_name:
            continue
        results.append(ToolCallResult(name=tool_name, payload=observation))
    return results


def _content_payload(content: Any) -> Any:
    # Multi-part content: join the text parts back into the JSON document.
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, dict) and "text" in part:
                parts.append(str(part["text"]))
            elif isinstance(part, str):
                parts.append(part)
        return "".join(parts)
    return content
