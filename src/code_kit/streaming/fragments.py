"""Fragment classifiers for StreamAccumulator.

A classifier maps one raw stream item to the text it contributes, or None
when the item carries no appendable text (metadata, tool use, pings).
"""

from typing import Any


def text_of(fragment: Any) -> str | None:
    """Plain strings, or any object exposing a `.text` attribute."""
    if isinstance(fragment, str):
        return fragment
    text = getattr(fragment, "text", None)
    return text if isinstance(text, str) else None


def anthropic_text_delta(event: Any) -> str | None:
    """Text from an Anthropic `content_block_delta` event with a text delta."""
    if getattr(event, "type", None) != "content_block_delta":
        return None
    delta = event.delta
    if getattr(delta, "type", None) != "text_delta":
        return None
    return delta.text


def is_message_stop(event: Any) -> bool:
    """Anthropic's explicit end-of-message signal."""
    return getattr(event, "type", None) == "message_stop"


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def agent_message_text(message: Any) -> str | None:
    """Text contributed by one agent-SDK `assistant` message.

    Text blocks contribute their stripped text, and `tool_use` blocks the
    `content` of their input (generated files arrive this way). Each
    contribution ends with a newline. Other message types contribute nothing.
    """
    if _field(message, "type") != "assistant":
        return None
    content = _field(_field(message, "message"), "content") or []

    parts: list[str] = []
    for block in content:
        block_type = _field(block, "type")
        if block_type == "text":
            text = (_field(block, "text") or "").strip()
            if text:
                parts.append(text + "\n")
        elif block_type == "tool_use":
            code = _field(_field(block, "input"), "content")
            if code:
                parts.append(f"{code}\n")
    return "".join(parts) or None


class AgentResultSignal:
    """Completion signal for agent-SDK streams.

    A `result` message ends the stream only once some assistant text has
    been seen; a result arriving first is skipped. Stateful, so use one
    instance per accumulator.
    """

    def __init__(self) -> None:
        self._started = False

    def __call__(self, message: Any) -> bool:
        if _field(message, "type") == "result":
            return self._started
        if agent_message_text(message):
            self._started = True
        return False
