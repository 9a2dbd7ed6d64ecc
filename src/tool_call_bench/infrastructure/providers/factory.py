"""
Provider factory

Creates the standard set of provider adapters sharing one pricing table.
"""

from __future__ import annotations

from tool_call_bench.harness_config import HarnessConfig, load_config
from tool_call_bench.infrastructure.providers.anthropic_native import AnthropicNativeProvider
from tool_call_bench.infrastructure.providers.base import LlmProvider
from tool_call_bench.infrastructure.providers.google_native import GoogleNativeProvider
from tool_call_bench.infrastructure.providers.ollama import OllamaProvider
from tool_call_bench.infrastructure.providers.openai_compatible import OpenAICompatibleProvider
from tool_call_bench.pricing import PricingTable, build_pricing_table

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEEPSEEK_BASE_URL = "https://api.deepseek.com"


def create_default_providers(
    pricing: PricingTable | None = None,
    config: HarnessConfig | None = None,
    include_local: bool = False,
) -> list[LlmProvider]:
    """
    Create the default provider list

    Args:
        pricing: Pricing table (built from MODEL_PRICING if not provided)
        config: HarnessConfig (loads from env if not provided)
        include_local: Also benchmark models served by a local Ollama instance

    Returns:
        list[LlmProvider]: Providers in benchmark order
    """
    if pricing is None:
        pricing = build_pricing_table()
    if config is None:
        config = load_config()

    providers: list[LlmProvider] = [
        OpenAICompatibleProvider(
            "Groq",
            "GROQ_API_KEY",
            ["llama-3.1-8b-instant", "llama-3.3-70b-versatile"],
            base_url=GROQ_BASE_URL,
            pricing=pricing,
            config=config,
        ),
        OpenAICompatibleProvider(
            "DeepseekProxy",
            "DEEPSEEK_API_KEY",
            ["deepseek-chat"],
            base_url=DEEPSEEK_BASE_URL,
            pricing=pricing,
            config=config,
            namespace="deepseek",
        ),
        OpenAICompatibleProvider(
            "OpenAI",
            "OPENAI_API_KEY",
            ["gpt-4o-mini", "gpt-4.1-nano"],
            pricing=pricing,
            config=config,
        ),
        GoogleNativeProvider(pricing=pricing, config=config),
        AnthropicNativeProvider(pricing=pricing, config=config),
    ]
    if include_local:
        providers.append(OllamaProvider(pricing=pricing, config=config))
    return providers
