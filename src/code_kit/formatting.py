import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def format_code_output(code: str, language: str | None = None) -> str:
    """Wrap code in a fenced markdown block."""
    return f"```{language or ''}\n{code}\n```"


def safe_json_parse(text: str) -> Any | None:
    """Parse JSON, returning None on malformed input."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.error("Failed to parse JSON: %s", exc)
        return None


def summarize_analysis(analysis: Mapping[str, Any]) -> str:
    """One-line summary of a structured code analysis.

    Recognized keys: `issues` (items with a `severity` of critical, major or
    minor), `suggestions`, `securityScore` and `performanceScore`. Missing
    keys are left out of the summary.
    """
    summary: list[str] = []

    issues = analysis.get("issues")
    if issues:
        counts = {"critical": 0, "major": 0, "minor": 0}
        for issue in issues:
            severity = issue.get("severity")
            if severity in counts:
                counts[severity] += 1
        summary.append(
            f"Issues: {counts['critical']} critical, "
            f"{counts['major']} major, {counts['minor']} minor"
        )

    suggestions = analysis.get("suggestions")
    if suggestions:
        summary.append(f"Suggestions: {len(suggestions)}")

    if analysis.get("securityScore"):
        summary.append(f"Security Score: {analysis['securityScore']}/10")

    if analysis.get("performanceScore"):
        summary.append(f"Performance Score: {analysis['performanceScore']}/10")

    return " | ".join(summary)
