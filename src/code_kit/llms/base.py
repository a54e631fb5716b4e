# src/code_kit/llms/base.py

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from code_kit.observability.base import MetricsHook
from code_kit.progress import ProgressIndicator
from code_kit.streaming import AccumulatedResult, Observer


@dataclass(frozen=True)
class CodeRequest:
    """A single code task for the model.

    Immutable. Created per call and discarded afterwards.
    """

    prompt: str
    source_code: str | None = None
    source_language: str | None = None
    target_language: str | None = None  # Translation tasks only
    max_output_tokens: int | None = None  # None = client default

    def __post_init__(self) -> None:
        if self.max_output_tokens is not None and self.max_output_tokens <= 0:
            raise ValueError("max_output_tokens must be > 0")


@dataclass(frozen=True)
class Usage:
    """Token usage for a completion."""

    input_tokens: int
    output_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class CompletionResult:
    """Normalized non-streaming response.

    Provider objects never escape the client.
    """

    text: str
    stop_reason: str | None
    usage: Usage
    latency_ms: float


class CodeClient(Protocol):
    """Protocol for code clients.

    - Stateless: every call receives a complete CodeRequest
    - Transport-only retries: network, timeout, rate-limit and overload
    - Fail fast on configuration and validation errors
    """

    metrics_hook: MetricsHook

    async def complete(self, request: CodeRequest) -> CompletionResult:
        """Single completion.

        Raises:
            ValidationError: `source_code` failed validation.
            ConfigurationError: The credential was rejected.
            TransientServiceError: Still failing after the last retry.
            UnexpectedError: Anything else.
        """
        ...

    async def stream(
        self,
        request: CodeRequest,
        observers: Iterable[Observer] = (),
        progress: ProgressIndicator | None = None,
    ) -> AccumulatedResult:
        """Streamed completion. Observers receive each text fragment in order.

        `progress`, when given, animates until the first fragment arrives.

        Raises:
            StreamError: The stream failed midway. Never retried.
            Otherwise as `complete`.
        """
        ...
