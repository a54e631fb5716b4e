# src/code_kit/observability/names.py

"""Standard metric names for code-kit observability.

All duration metrics are in milliseconds.
"""

# ============================================================================
# Completion Metrics
# ============================================================================

# Duration
COMPLETION_DURATION = "code_completion_duration"

# Counters
COMPLETION_REQUESTS_TOTAL = "code_completion_requests_total"
COMPLETION_ERRORS_TOTAL = "code_completion_errors_total"

# Counters (token usage)
COMPLETION_TOKENS_INPUT = "code_completion_tokens_input"
COMPLETION_TOKENS_OUTPUT = "code_completion_tokens_output"


# ============================================================================
# Streaming Metrics
# ============================================================================

# Duration
STREAM_DURATION = "code_stream_duration"

# Counters
STREAM_REQUESTS_TOTAL = "code_stream_requests_total"
STREAM_ERRORS_TOTAL = "code_stream_errors_total"
STREAM_FRAGMENTS_TOTAL = "code_stream_fragments_total"


# ============================================================================
# Retry Metrics
# ============================================================================

RETRY_ATTEMPTS_TOTAL = "retry_attempts_total"
