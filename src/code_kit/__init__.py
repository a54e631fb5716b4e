# Config
from .config import ClientConfig

# Errors
from .errors import (
    CodeKitError,
    ConfigurationError,
    StreamError,
    TransientServiceError,
    UnexpectedError,
    ValidationError,
    classify_error,
    describe_error,
)

# Formatting
from .formatting import format_code_output, safe_json_parse, summarize_analysis

# Clients
from .llms import (
    AnthropicCodeClient,
    CodeClient,
    CodeRequest,
    CompletionResult,
    create_code_client,
)

# Observability
from .observability import LoggingMetricsHook, MetricsHook, NoOpMetricsHook

# Progress
from .progress import ProgressIndicator, ProgressState

# Retry
from .retry import RetryEvent, RetryPolicy, run_with_retry

# Streaming
from .streaming import AccumulatedResult, StreamAccumulator

# Validation
from .validation import (
    ValidationResult,
    check_token_limits,
    estimate_tokens,
    validate_code_input,
    within_budget,
)

__all__ = [
    # Config
    "ClientConfig",
    # Errors
    "CodeKitError",
    "ConfigurationError",
    "StreamError",
    "TransientServiceError",
    "UnexpectedError",
    "ValidationError",
    "classify_error",
    "describe_error",
    # Formatting
    "format_code_output",
    "safe_json_parse",
    "summarize_analysis",
    # Clients
    "AnthropicCodeClient",
    "CodeClient",
    "CodeRequest",
    "CompletionResult",
    "create_code_client",
    # Observability
    "LoggingMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Progress
    "ProgressIndicator",
    "ProgressState",
    # Retry
    "RetryEvent",
    "RetryPolicy",
    "run_with_retry",
    # Streaming
    "AccumulatedResult",
    "StreamAccumulator",
    # Validation
    "ValidationResult",
    "check_token_limits",
    "estimate_tokens",
    "validate_code_input",
    "within_budget",
]
