"""
Provider base classes

Defines the abstract provider adapter and chat session inherited by every
backend, plus the shared tool dispatch used inside each session's tool loop.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from tool_call_bench.domain.scenario import Scenario, ToolService
from tool_call_bench.domain.value_objects import ChatResponse, ModelPricing
from tool_call_bench.harness_config import HarnessConfig, load_config
from tool_call_bench.pricing import PricingTable, build_pricing_table

logger = logging.getLogger(__name__)


class ProviderConfigurationError(Exception):
    """Provider cannot be used as configured (e.g. missing API key)"""
    pass


class ChatSession(ABC):
    """
    Conversation bound to one model and one scenario's tools

    Message history is kept for the lifetime of the session, so later prompts
    of a scenario can refer back to earlier ones.
    """

    @abstractmethod
    async def send(self, prompt: str) -> ChatResponse:
        """Send a user prompt, run the tool-call loop, and return the final response"""
        pass

    async def aclose(self) -> None:
        """Release the underlying SDK client (connection pool)"""
        pass


class LlmProvider(ABC):
    """Abstract base class for provider adapters"""

    def __init__(
        self,
        name: str,
        api_key_env_var: str | None,
        supported_models: list[str],
        pricing: PricingTable | None = None,
        config: HarnessConfig | None = None,
        namespace: str | None = None,
    ):
        """
        Args:
            name: Display name (e.g. Groq, GoogleNative)
            api_key_env_var: Environment variable holding the API key (None for local runtimes)
            supported_models: Model identifiers benchmarked for this provider
            pricing: Pricing table (defaults to the built-in table)
            config: HarnessConfig (loads from env if not provided)
            namespace: Prefix of full model names (defaults to the lower-cased name)
        """
        self.name = name
        self.api_key_env_var = api_key_env_var
        self.supported_models = list(supported_models)
        self.pricing = pricing if pricing is not None else build_pricing_table()
        self.config = config if config is not None else load_config()
        self.namespace = namespace or name.lower()

    def get_supported_models(self) -> list[str]:
        return list(self.supported_models)

    def get_full_model_name(self, model: str) -> str:
        return f"{self.namespace}/{model}"

    def is_available(self) -> bool:
        api_key = os.environ.get(self.api_key_env_var or "")
        return bool(api_key and api_key.strip())

    def get_pricing(self, model: str) -> ModelPricing | None:
        return self.pricing.lookup(self.get_full_model_name(model))

    def _require_api_key(self) -> str:
        api_key = os.environ.get(self.api_key_env_var or "")
        if not api_key or not api_key.strip():
            raise ProviderConfigurationError(
                f"API key not found for {self.name}. Set environment variable: {self.api_key_env_var}"
            )
        return api_key

    @abstractmethod
    def create_session(self, model: str, scenario: Scenario) -> ChatSession:
        """
        Create a fresh chat session bound to model and the scenario's tools

        Raises:
            ProviderConfigurationError: If the provider is not configured
        """
        pass


def execute_tool_call(tool_service: ToolService, name: str, arguments: dict | str | None) -> str:
    """
    Run one tool call requested by the model and serialize the result

    Failures (bad JSON arguments, unknown tool, tool errors) are returned to
    the model as an error payload; the conversation continues.

    Args:
        tool_service: Scenario tool service
        name: Tool name
        arguments: Parsed arguments, or the raw JSON string sent by the model

    Returns:
        JSON string for the tool result message
    """
    try:
        if isinstance(arguments, str):
            arguments = json.loads(arguments) if arguments.strip() else {}
        result: Any = tool_service.invoke(name, dict(arguments or {}))
        return json.dumps(result, default=str)
    except (ValueError, TypeError, KeyError) as e:
        logger.warning("    Tool call %s failed: %s", name, e)
        return json.dumps({"error": str(e), "status": "FAILED"})
