# src/code_kit/llms/anthropic.py

import logging
from collections.abc import Callable, Iterable
from time import monotonic
from typing import Any

from anthropic import AsyncAnthropic

from code_kit.errors import CodeKitError, StreamError, classify_error
from code_kit.formatting import format_code_output
from code_kit.observability import names
from code_kit.observability.base import MetricsHook, NoOpMetricsHook
from code_kit.progress import ProgressIndicator
from code_kit.retry import RetryEvent, RetryPolicy, run_with_retry
from code_kit.streaming import (
    AccumulatedResult,
    Observer,
    StreamAccumulator,
    anthropic_text_delta,
    is_message_stop,
)
from code_kit.validation import check_token_limits, validate_code_input

from .base import CodeClient, CodeRequest, CompletionResult, Usage

logger = logging.getLogger(__name__)


def build_messages(request: CodeRequest) -> list[dict[str, Any]]:
    """Convert a CodeRequest to Anthropic's message format.

    Source code is appended to the prompt as a fenced block tagged with the
    source language.
    """
    parts = [request.prompt]
    if request.source_code:
        parts.append(format_code_output(request.source_code, request.source_language))
    if request.target_language:
        parts.append(f"Target language: {request.target_language}")
    return [{"role": "user", "content": "\n\n".join(parts)}]


class AnthropicCodeClient(CodeClient):
    """Anthropic code client.

    Stateless. Transport-only retries through `run_with_retry`; the SDK's own
    retry loop is disabled so attempts are counted in one place.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 60.0,
        max_tokens: int = 4000,
        temperature: float = 0.1,
        retry_policy: RetryPolicy | None = None,
        on_retry: Callable[[RetryEvent], None] | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._retry_policy = retry_policy or RetryPolicy()
        self._on_retry = on_retry
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized AnthropicCodeClient with model=%s, timeout=%s, max_attempts=%d",
            model,
            timeout,
            self._retry_policy.max_attempts,
        )

    async def complete(self, request: CodeRequest) -> CompletionResult:
        self._preflight(request)
        start = monotonic()
        self.metrics_hook.increment(names.COMPLETION_REQUESTS_TOTAL)

        try:
            raw = await self._with_retry(self._request_kwargs(request))
        except CodeKitError as exc:
            self.metrics_hook.increment(
                names.COMPLETION_ERRORS_TOTAL, labels={"error": type(exc).__name__}
            )
            raise

        elapsed_ms = 1000 * (monotonic() - start)
        result = self._normalize_response(raw, elapsed_ms)

        self.metrics_hook.record_latency(names.COMPLETION_DURATION, elapsed_ms)
        self.metrics_hook.increment(
            names.COMPLETION_TOKENS_INPUT, result.usage.input_tokens
        )
        self.metrics_hook.increment(
            names.COMPLETION_TOKENS_OUTPUT, result.usage.output_tokens
        )
        logger.info(
            "Anthropic completion: stop=%s, tokens=%d, latency=%.0fms",
            result.stop_reason,
            result.usage.total_tokens,
            elapsed_ms,
        )
        return result

    async def stream(
        self,
        request: CodeRequest,
        observers: Iterable[Observer] = (),
        progress: ProgressIndicator | None = None,
    ) -> AccumulatedResult:
        self._preflight(request)
        start = monotonic()
        self.metrics_hook.increment(names.STREAM_REQUESTS_TOTAL)

        # The spinner goes first so its line is cleared before any text.
        stream_observers: list[Observer] = []
        if progress is not None:
            stream_observers.append(lambda _: progress.stop())
        stream_observers.extend(observers)
        accumulator = StreamAccumulator(
            anthropic_text_delta,
            is_complete=is_message_stop,
            observers=stream_observers,
        )

        if progress is not None:
            progress.start("Generating")
        try:
            # Only opening the stream is retried; replaying a half-delivered
            # stream would repeat fragments to observers.
            source = await self._with_retry(
                {**self._request_kwargs(request), "stream": True}
            )
            result = await accumulator.consume(source)
        except CodeKitError as exc:
            self.metrics_hook.increment(
                names.STREAM_ERRORS_TOTAL, labels={"error": type(exc).__name__}
            )
            if isinstance(exc, StreamError):
                logger.error(
                    "Stream failed after %d characters", len(exc.partial_text)
                )
            raise
        finally:
            if progress is not None:
                progress.stop()

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.STREAM_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.STREAM_FRAGMENTS_TOTAL, result.fragment_count)
        logger.info(
            "Anthropic stream: characters=%d, fragments=%d, latency=%.0fms",
            result.char_count,
            result.fragment_count,
            elapsed_ms,
        )
        return result

    def _preflight(self, request: CodeRequest) -> None:
        """Fail fast on invalid source code; warn when the input is large."""
        if request.source_code is not None:
            validate_code_input(
                request.source_code, request.source_language
            ).raise_for_failure()
        content = build_messages(request)[0]["content"]
        check_token_limits(content, self._resolve_max_tokens(request))

    def _resolve_max_tokens(self, request: CodeRequest) -> int:
        return request.max_output_tokens or self._max_tokens

    def _request_kwargs(self, request: CodeRequest) -> dict[str, Any]:
        logger.debug(
            "Calling Anthropic: model=%s, source_language=%s, target_language=%s",
            self._model,
            request.source_language,
            request.target_language,
        )
        return {
            "model": self._model,
            "messages": build_messages(request),
            "max_tokens": self._resolve_max_tokens(request),
            "temperature": self._temperature,
        }

    async def _with_retry(self, kwargs: dict[str, Any]) -> Any:
        return await run_with_retry(
            lambda: self._call_api(kwargs),
            self._retry_policy,
            on_retry=self._on_retry,
            metrics_hook=self.metrics_hook,
        )

    async def _call_api(self, kwargs: dict[str, Any]) -> Any:
        """Call the Messages API, classifying provider errors."""
        try:
            return await self._client.messages.create(**kwargs)
        except Exception as exc:
            raise classify_error(exc) from exc

    def _normalize_response(self, raw: Any, latency_ms: float) -> CompletionResult:
        """Provider objects stop here."""
        text = "".join(block.text for block in raw.content if block.type == "text")
        return CompletionResult(
            text=text,
            stop_reason=raw.stop_reason,
            usage=Usage(
                input_tokens=raw.usage.input_tokens,
                output_tokens=raw.usage.output_tokens,
            ),
            latency_ms=latency_ms,
        )
