import logging
import math

logger = logging.getLogger(__name__)

# Rough heuristic: ~4 characters per token for English text and code.
CHARS_PER_TOKEN = 4
DEFAULT_SAFETY_MARGIN = 0.8


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def within_budget(
    text: str, max_tokens: int, safety_margin: float = DEFAULT_SAFETY_MARGIN
) -> bool:
    """Return False when `text` may not leave room for a response.

    Advisory only: callers should warn, never block the call.
    """
    return estimate_tokens(text) <= max_tokens * safety_margin


def check_token_limits(text: str, max_tokens: int = 4000) -> bool:
    if within_budget(text, max_tokens):
        return True
    logger.warning(
        "Input may exceed token limit (estimated: %d, limit: %d)",
        estimate_tokens(text),
        max_tokens,
    )
    return False
