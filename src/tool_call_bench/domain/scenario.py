"""
Scenario and Tool Service Contracts

A scenario bundles the prompts sent to a model, the stateful tool service the
model may invoke, and the validator that grades what the service recorded.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from tool_call_bench.domain.value_objects import ToolSpec


class Resettable(ABC):
    """Capability: state can be returned to its initial empty form"""

    @abstractmethod
    def reset(self) -> None:
        pass


class ToolService(Resettable):
    """
    Stateful collaborator whose tools are exposed to the model

    Implementations record every invocation so a scenario's validator can
    inspect them after the prompts have been sent. Services without state to
    clear should implement ``reset`` as a no-op.
    """

    @abstractmethod
    def tool_specs(self) -> list[ToolSpec]:
        """Tools offered to the model"""
        pass

    @abstractmethod
    def invoke(self, name: str, arguments: dict[str, Any]) -> Any:
        """Execute a tool call requested by the model and return a JSON-serializable result"""
        pass

    @abstractmethod
    def get_total_call_count(self) -> int:
        pass


@dataclass(frozen=True)
class Scenario:
    """Immutable benchmark case"""
    name: str
    prompts: tuple[str, ...]
    tool_service: ToolService
    validate: Callable[[], float]
    system_prompt: str = ""

    def __post_init__(self):
        if not self.prompts:
            raise ValueError(f"Scenario '{self.name}' must have at least one prompt")
        # Accept any sequence but store a tuple so the scenario stays immutable
        object.__setattr__(self, "prompts", tuple(self.prompts))
