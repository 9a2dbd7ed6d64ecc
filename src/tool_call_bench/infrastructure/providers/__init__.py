"""
Provider adapter package

Provides a unified chat-session interface over each LLM backend.
"""

from tool_call_bench.infrastructure.providers.base import (
    ChatSession,
    LlmProvider,
    ProviderConfigurationError,
)
from tool_call_bench.infrastructure.providers.factory import create_default_providers

__all__ = ["ChatSession", "LlmProvider", "ProviderConfigurationError", "create_default_providers"]
