# src/code_kit/llms/factory.py

from code_kit.config import ClientConfig
from code_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import CodeClient


def create_code_client(
    config: ClientConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> CodeClient:
    """Create a code client from config.

    Args:
        config: Client configuration, usually from `ClientConfig.from_env()`.
        metrics_hook: Optional metrics hook for observability.

    Returns:
        Configured CodeClient implementation.

    Example:
        >>> config = ClientConfig.from_env()
        >>> client = create_code_client(config)
        >>> result = await client.complete(CodeRequest(prompt="..."))
    """
    from .anthropic import AnthropicCodeClient

    return AnthropicCodeClient(
        api_key=config.api_key,
        model=config.model,
        timeout=config.timeout,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        retry_policy=config.retry_policy(),
        metrics_hook=metrics_hook,
    )
