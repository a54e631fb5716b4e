# src/code_kit/errors.py

"""Error taxonomy for code-kit.

Every failure surfaced by the library is one of these kinds:

- ConfigurationError: required credential missing or rejected. Never retried.
- ValidationError: input rejected before the call is attempted. Never retried.
- TransientServiceError: network, timeout, rate limit, conflict or server
  overload.
  Retried under the retry policy, then surfaced as-is.
- StreamError: failure mid-stream. Carries the partial text.
- UnexpectedError: anything else. Logged with detail, never retried.

Provider exceptions are mapped onto this taxonomy by `classify_error`.
"""

import logging
from typing import Literal

import anthropic

logger = logging.getLogger(__name__)

TransientKind = Literal["rate_limit", "network", "timeout", "conflict", "server"]


class CodeKitError(Exception):
    """Base class for all code-kit errors."""


class ConfigurationError(CodeKitError):
    """Required configuration (usually the API key) is missing or invalid."""


class ValidationError(CodeKitError):
    """Input failed validation; the call was never attempted."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransientServiceError(CodeKitError):
    """Failure that may succeed on retry."""

    def __init__(self, message: str, *, kind: TransientKind) -> None:
        super().__init__(message)
        self.kind = kind


class StreamError(CodeKitError):
    """The stream failed after delivering `partial_text`."""

    def __init__(self, message: str, *, partial_text: str) -> None:
        super().__init__(message)
        self.partial_text = partial_text


class UnexpectedError(CodeKitError):
    """Uncategorized failure."""


# Kinds that must fail fast, without entering the retry loop.
NON_RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    ConfigurationError,
    ValidationError,
    UnexpectedError,
)


def classify_error(exc: BaseException) -> CodeKitError:
    """Map a provider exception onto the code-kit taxonomy.

    Already-classified errors are returned unchanged. The caller is expected
    to `raise classify_error(exc) from exc`.
    """
    if isinstance(exc, CodeKitError):
        return exc

    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return ConfigurationError(f"Credential rejected by service: {exc}")
    if isinstance(exc, anthropic.RateLimitError):
        return TransientServiceError(str(exc), kind="rate_limit")
    # APITimeoutError subclasses APIConnectionError; check it first.
    if isinstance(exc, anthropic.APITimeoutError):
        return TransientServiceError(str(exc), kind="timeout")
    if isinstance(exc, anthropic.APIConnectionError):
        return TransientServiceError(str(exc), kind="network")
    if isinstance(exc, anthropic.APIStatusError):
        if exc.status_code == 408:
            return TransientServiceError(str(exc), kind="timeout")
        if exc.status_code == 409:
            return TransientServiceError(str(exc), kind="conflict")
        if exc.status_code >= 500:
            return TransientServiceError(str(exc), kind="server")

    logger.error("Unexpected error: %r", exc, exc_info=exc)
    return UnexpectedError(f"{type(exc).__name__}: {exc}")


def describe_error(exc: BaseException) -> str:
    """Human-readable message, one stable category per error kind."""
    if isinstance(exc, ConfigurationError):
        return f"Invalid or missing API key. Check ANTHROPIC_API_KEY. ({exc})"
    if isinstance(exc, ValidationError):
        return f"Invalid input: {exc.reason}."
    if isinstance(exc, TransientServiceError):
        if exc.kind == "rate_limit":
            return "Rate limit exceeded. Wait before making more requests."
        if exc.kind == "timeout":
            return "Request timeout. The operation took too long to complete."
        if exc.kind == "network":
            return "Network error. Check your internet connection."
        if exc.kind == "conflict":
            return "Request conflicted with another in-flight request. Retry shortly."
        return "Service temporarily unavailable. Try again later."
    if isinstance(exc, StreamError):
        return (
            f"Stream interrupted after {len(exc.partial_text)} characters: {exc}"
        )
    if "credit balance" in str(exc).lower():
        return "Insufficient credits. Check your Anthropic account."
    return f"Unexpected error: {exc}"
