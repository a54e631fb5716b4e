from .code_input import (
    MAX_CODE_LENGTH,
    SUPPORTED_LANGUAGES,
    ValidationResult,
    validate_code_input,
)
from .tokens import check_token_limits, estimate_tokens, within_budget

__all__ = [
    "MAX_CODE_LENGTH",
    "SUPPORTED_LANGUAGES",
    "ValidationResult",
    "validate_code_input",
    "check_token_limits",
    "estimate_tokens",
    "within_budget",
]
