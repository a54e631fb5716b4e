import logging
from dataclasses import dataclass

from code_kit.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_CODE_LENGTH = 100_000

SUPPORTED_LANGUAGES = frozenset(
    {
        "javascript",
        "typescript",
        "python",
        "java",
        "cpp",
        "c",
        "csharp",
        "go",
        "rust",
        "php",
        "ruby",
        "swift",
        "kotlin",
        "scala",
        "html",
        "css",
        "sql",
        "bash",
        "powershell",
    }
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of `validate_code_input`.

    `unrecognized_language` is advisory: it never makes `ok` False.
    """

    ok: bool
    reason: str | None = None
    unrecognized_language: bool = False

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise ValidationError(self.reason or "invalid input")


def validate_code_input(code: str, language: str | None = None) -> ValidationResult:
    """Validate a code payload before sending it to the service.

    Rules are checked in order and the first failure wins:
    non-empty after trimming, at most MAX_CODE_LENGTH characters, then a
    language check that only sets the advisory flag. Without a language
    the language check is skipped.
    """
    if not code or not code.strip():
        logger.debug("Rejected code input: empty")
        return ValidationResult(ok=False, reason="empty input")

    if len(code) > MAX_CODE_LENGTH:
        logger.debug("Rejected code input: %d characters", len(code))
        return ValidationResult(ok=False, reason="input too large")

    if language is not None and language.lower() not in SUPPORTED_LANGUAGES:
        logger.warning("Language '%s' may not be fully supported", language)
        return ValidationResult(ok=True, unrecognized_language=True)

    return ValidationResult(ok=True)
