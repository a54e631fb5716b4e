from .accumulator import AccumulatedResult, Observer, StreamAccumulator
from .fragments import (
    AgentResultSignal,
    agent_message_text,
    anthropic_text_delta,
    is_message_stop,
    text_of,
)

__all__ = [
    "AccumulatedResult",
    "AgentResultSignal",
    "Observer",
    "StreamAccumulator",
    "agent_message_text",
    "anthropic_text_delta",
    "is_message_stop",
    "text_of",
]
