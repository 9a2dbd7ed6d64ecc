"""
Ollama (local runtime) provider

Talks to Ollama through its OpenAI-compatible endpoint. Local models cost
nothing per token, so pricing is synthesized instead of looked up.
"""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI, OpenAI

from tool_call_bench.domain.constants import _LOCAL_MODEL_PRICING
from tool_call_bench.domain.value_objects import ModelPricing
from tool_call_bench.harness_config import HarnessConfig
from tool_call_bench.infrastructure.providers.openai_compatible import OpenAICompatibleProvider
from tool_call_bench.pricing import PricingTable

logger = logging.getLogger(__name__)

# Ollama ignores the key but the OpenAI client requires one
OLLAMA_API_KEY = "ollama"

TOOL_CALLING_MODELS = [
    "qwen2.5:0.5b",
    "qwen2.5:1.5b-instruct",
    "qwen3:1.7b",
    "qwen3:4b",
    "qwen3:8b",
    "llama3.2:1b",
    "llama3.2:3b",
    "llama3.1:8b",
    "mistral:7b-instruct",
    "hermes3:8b",
]


def estimate_tokens_per_second(model: str) -> int:
    """Rough throughput estimate by parameter count (actual speed depends on hardware)"""
    if "0.5b" in model or "1b" in model:
        return 100
    if "1.5b" in model or "3b" in model:
        return 75
    if "7b" in model or "8b" in model:
        return 50
    if "35b" in model or "70b" in model:
        return 20
    return 40


class OllamaProvider(OpenAICompatibleProvider):
    """Client for models served by a local Ollama instance"""

    def __init__(
        self,
        supported_models: list[str] | None = None,
        base_url: str | None = None,
        pricing: PricingTable | None = None,
        config: HarnessConfig | None = None,
    ):
        """
        Args:
            supported_models: Models to benchmark (default: TOOL_CALLING_MODELS)
            base_url: Ollama OpenAI-compatible endpoint (falls back to config.ollama.base_url)
            pricing: Pricing table (unused for lookups, kept for interface parity)
            config: HarnessConfig
        """
        super().__init__(
            name="Ollama",
            api_key_env_var=None,
            supported_models=supported_models or TOOL_CALLING_MODELS,
            pricing=pricing,
            config=config,
        )
        # Configuration priority: argument > config (env) > default value
        self.base_url = base_url or self.config.ollama.base_url

    def get_full_model_name(self, model: str) -> str:
        return f"{self.namespace}/" + model.replace(":", "-")

    def is_available(self) -> bool:
        try:
            OpenAI(base_url=self.base_url, api_key=OLLAMA_API_KEY, timeout=5.0, max_retries=0).models.list()
        except openai.APIError as e:
            logger.warning("Ollama not available at %s: %s", self.base_url, e)
            return False
        logger.info("Connected to Ollama at %s", self.base_url)
        return True

    def get_pricing(self, model: str) -> ModelPricing:
        return ModelPricing(
            input_price_per_million=_LOCAL_MODEL_PRICING["input"],
            output_price_per_million=_LOCAL_MODEL_PRICING["output"],
            supports_tool_calling=_LOCAL_MODEL_PRICING["tool_calling"],
            tokens_per_second=estimate_tokens_per_second(model),
        )

    def _make_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(base_url=self.base_url, api_key=OLLAMA_API_KEY, max_retries=0)
