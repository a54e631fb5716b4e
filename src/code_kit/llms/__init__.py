# src/code_kit/llms/__init__.py

"""Code client layer for code-kit.

A thin, stateless client over the Anthropic Messages API for code tasks.

Design principles:
- Stateless: every call receives a complete CodeRequest
- Transport only: retries only on network, timeout, rate-limit and overload
- Fail fast: configuration and validation errors are never retried
- No leakage: provider objects never escape the client

Example:
    >>> from code_kit.config import ClientConfig
    >>> from code_kit.llms import CodeRequest, create_code_client
    >>>
    >>> client = create_code_client(ClientConfig.from_env())
    >>> result = await client.stream(
    ...     CodeRequest(prompt="Write a factorial function", source_language="python"),
    ...     observers=[lambda text: print(text, end="", flush=True)],
    ... )
    >>> print(result.char_count)
"""

from .anthropic import AnthropicCodeClient, build_messages
from .base import CodeClient, CodeRequest, CompletionResult, Usage
from .factory import create_code_client

__all__ = [
    # Factory
    "create_code_client",
    # Protocol
    "CodeClient",
    # Implementations
    "AnthropicCodeClient",
    "build_messages",
    # Types
    "CodeRequest",
    "CompletionResult",
    "Usage",
]
