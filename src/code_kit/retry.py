# src/code_kit/retry.py

"""Retry with exponential backoff for async operations.

Backoff before retry n (1-based) is

    initial_delay_ms * backoff_multiplier ** (n - 1)

optionally capped at `max_delay_ms`. Only the final error propagates;
errors from earlier attempts are discarded.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from code_kit.errors import NON_RETRYABLE_ERRORS
from code_kit.observability import names
from code_kit.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Immutable retry configuration, reused across calls."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    initial_delay_ms: int = Field(default=1000, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    max_delay_ms: int | None = Field(default=None, ge=0)  # None = uncapped


@dataclass(frozen=True)
class RetryEvent:
    """Emitted before each retry. `delay_ms` is the delay actually slept."""

    attempt: int
    delay_ms: float
    error: BaseException


def is_retryable(exc: BaseException) -> bool:
    """Default predicate: any Exception except the fail-fast kinds.

    BaseExceptions such as asyncio.CancelledError are never retried.
    """
    return isinstance(exc, Exception) and not isinstance(exc, NON_RETRYABLE_ERRORS)


def _wait_strategy(policy: RetryPolicy) -> wait_exponential:
    kwargs: dict[str, float] = {}
    if policy.max_delay_ms is not None:
        kwargs["max"] = policy.max_delay_ms / 1000
    return wait_exponential(
        multiplier=policy.initial_delay_ms / 1000,
        exp_base=policy.backoff_multiplier,
        **kwargs,
    )


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    on_retry: Callable[[RetryEvent], None] | None = None,
    retry_on: Callable[[BaseException], bool] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> T:
    """Run `operation` until it succeeds or `policy.max_attempts` is reached.

    Args:
        operation: Zero-argument coroutine factory. Called once per attempt.
        policy: Retry policy; defaults to 3 attempts, 1s initial, x2 backoff.
        on_retry: Receives a RetryEvent before each backoff sleep.
        retry_on: Predicate deciding whether an error is retryable.
            Defaults to `is_retryable`.
        sleep: Backoff sleep, in seconds. Injected in tests.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        The result of the first successful attempt.

    Raises:
        The error from the final attempt, unchanged. Non-retryable errors
        propagate immediately.
    """
    policy = policy or RetryPolicy()

    def before_sleep(retry_state: RetryCallState) -> None:
        if retry_state.outcome is None or retry_state.next_action is None:
            return
        error = retry_state.outcome.exception()
        event = RetryEvent(
            attempt=retry_state.attempt_number,
            delay_ms=retry_state.next_action.sleep * 1000,
            error=error,
        )
        logger.warning(
            "Attempt %d failed (%s), retrying in %.0fms",
            event.attempt,
            type(error).__name__,
            event.delay_ms,
        )
        metrics_hook.increment(names.RETRY_ATTEMPTS_TOTAL)
        if on_retry is not None:
            on_retry(event)

    async for attempt in AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(policy.max_attempts),
        wait=_wait_strategy(policy),
        retry=retry_if_exception(retry_on or is_retryable),
        before_sleep=before_sleep,
        reraise=True,
    ):
        with attempt:
            return await operation()

    raise AssertionError("unreachable")  # pragma: no cover
