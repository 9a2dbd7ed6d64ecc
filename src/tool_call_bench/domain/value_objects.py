"""
Domain Value Objects

Defines immutable data structures representing values such as model pricing,
chat responses, tool definitions, and captured tool invocations.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ModelPricing:
    """Pricing and capability entry for one model (USD per 1M tokens)"""
    input_price_per_million: float
    output_price_per_million: float
    supports_tool_calling: bool = True
    tokens_per_second: int | None = None

    def calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Token cost in USD for a single response"""
        return (
            prompt_tokens * self.input_price_per_million / 1_000_000
            + completion_tokens * self.output_price_per_million / 1_000_000
        )


@dataclass(frozen=True)
class ToolSpec:
    """Provider-neutral tool definition (JSON schema parameters)"""
    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiCall:
    """A single parameter write captured by a mock tool service"""
    path: str
    value: Any

    def __str__(self) -> str:
        return f"ApiCall{{path='{self.path}', value={self.value}}}"


@dataclass
class ChatResponse:
    """Model response to one user prompt, after its tool-call loop has finished"""
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    tool_calls: int = 0

    def __post_init__(self):
        if self.prompt_tokens < 0:
            raise ValueError("prompt_tokens must be non-negative")
        if self.completion_tokens < 0:
            raise ValueError("completion_tokens must be non-negative")
