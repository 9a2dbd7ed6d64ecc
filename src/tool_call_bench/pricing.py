"""
Pricing Table

Immutable mapping from full model name (``<provider>/<model>``) to ModelPricing.
Built once per benchmark and handed to the provider adapters.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from tool_call_bench.domain.constants import MODEL_PRICING
from tool_call_bench.domain.value_objects import ModelPricing

NATIVE_SUFFIX = "-native"


class PricingTable:
    """Read-only pricing lookup with native-variant fallback"""

    def __init__(self, entries: Mapping[str, ModelPricing]) -> None:
        self._entries = MappingProxyType(dict(entries))

    @property
    def entries(self) -> Mapping[str, ModelPricing]:
        return self._entries

    def __contains__(self, full_model_name: object) -> bool:
        return full_model_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, full_model_name: str) -> ModelPricing | None:
        """
        Resolve pricing for a full model name

        Tries the exact key first. When absent and the provider namespace is a
        ``-native`` variant, falls back to the generic provider key so several
        adapters for the same vendor share one entry
        (``foo-native/modelX`` -> ``foo/modelX``).

        Args:
            full_model_name: e.g. ``groq/llama-3.1-8b-instant``

        Returns:
            ModelPricing, or None when no entry matches
        """
        pricing = self._entries.get(full_model_name)
        if pricing is not None:
            return pricing

        namespace, sep, model = full_model_name.partition("/")
        if sep and namespace.endswith(NATIVE_SUFFIX):
            generic = namespace[: -len(NATIVE_SUFFIX)] + "/" + model
            return self._entries.get(generic)
        return None


def build_pricing_table(raw: Mapping[str, dict] | None = None) -> PricingTable:
    """
    Build a PricingTable from raw dictionary data

    Args:
        raw: {full model name: {"input", "output", "tool_calling", "tps"}}
             (defaults to MODEL_PRICING)

    Returns:
        PricingTable
    """
    if raw is None:
        raw = MODEL_PRICING

    entries = {
        name: ModelPricing(
            input_price_per_million=float(data["input"]),
            output_price_per_million=float(data["output"]),
            supports_tool_calling=bool(data.get("tool_calling", True)),
            tokens_per_second=data.get("tps"),
        )
        for name, data in raw.items()
    }
    return PricingTable(entries)
