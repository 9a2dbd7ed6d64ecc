"""
Mock Tool Services

Recording stand-ins for the systems a model controls during a scenario.
They keep just enough state to answer reads and let validators inspect
every write.
"""

from __future__ import annotations

from typing import Any

from tool_call_bench.domain.scenario import ToolService
from tool_call_bench.domain.value_objects import ApiCall, ToolSpec

_API_CALL_SCHEMA = {
    "type": "object",
    "properties": {
        "path": {"type": "string", "description": "API path to set (e.g., ch.0.cfg.name)"},
        "value": {"type": "string", "description": "Value to assign"},
    },
    "required": ["path", "value"],
}


class MockMixingConsoleService(ToolService):
    """Mixing console reached through path/value parameter calls"""

    def __init__(self) -> None:
        self._call_count = 0
        self._captured_api_calls: list[ApiCall] = []
        self._console_state: dict[str, Any] = {}

    def tool_specs(self) -> list[ToolSpec]:
        return [
            ToolSpec(
                name="get_parameter",
                description="Get current value of a mixer parameter",
                parameters={
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "API path to get (e.g., ch.0.cfg.name)"},
                    },
                    "required": ["path"],
                },
            ),
            ToolSpec(
                name="set_single_parameter",
                description="Make a single API call to the Mixing Station console. Use 0-based channel indexing.",
                parameters=_API_CALL_SCHEMA,
            ),
            ToolSpec(
                name="set_multiple_parameters",
                description=(
                    "Make multiple API calls in sequence for complex mixer setup. "
                    "Use 0-based channel indexing for all paths."
                ),
                parameters={
                    "type": "object",
                    "properties": {
                        "api_calls": {
                            "type": "array",
                            "description": "List of API calls to execute in order",
                            "items": _API_CALL_SCHEMA,
                        },
                    },
                    "required": ["api_calls"],
                },
            ),
        ]

    def invoke(self, name: str, arguments: dict[str, Any]) -> Any:
        if name == "get_parameter":
            return self.get_parameter(arguments["path"])
        if name == "set_single_parameter":
            return self.set_single_parameter(arguments["path"], arguments["value"])
        if name == "set_multiple_parameters":
            return self.set_multiple_parameters(arguments["api_calls"])
        raise KeyError(f"Unknown tool: {name}")

    def get_parameter(self, path: str) -> dict:
        self._call_count += 1
        return {"path": path, "value": self._console_state.get(path), "status": "SUCCESS"}

    def set_single_parameter(self, path: str, value: Any) -> dict:
        self._call_count += 1
        self._captured_api_calls.append(ApiCall(path, value))
        self._console_state[path] = value
        return {"path": path, "value": value, "status": "SUCCESS"}

    def set_multiple_parameters(self, api_calls: list[dict]) -> list[dict]:
        return [self.set_single_parameter(call["path"], call["value"]) for call in api_calls]

    # Test helpers
    def get_total_call_count(self) -> int:
        return self._call_count

    def get_captured_api_calls(self) -> list[ApiCall]:
        return list(self._captured_api_calls)

    def reset(self) -> None:
        self._call_count = 0
        self._captured_api_calls.clear()
        self._console_state.clear()


class MockWeatherService(ToolService):
    """Weather lookup with fixed temperatures for a few cities"""

    TEMPERATURES = {"Paris": 15.0, "Tokyo": 10.0, "San Francisco": 30.0}

    def __init__(self) -> None:
        self._call_count = 0
        self._location_call_counts: dict[str, int] = {}

    def tool_specs(self) -> list[ToolSpec]:
        return [
            ToolSpec(
                name="get_weather",
                description="Get weather information for a specific location",
                parameters={
                    "type": "object",
                    "properties": {
                        "location": {"type": "string", "description": "The city and state e.g. San Francisco, CA"},
                        "unit": {"type": "string", "enum": ["C", "F"], "description": "Temperature unit"},
                    },
                    "required": ["location", "unit"],
                },
            ),
        ]

    def invoke(self, name: str, arguments: dict[str, Any]) -> Any:
        if name != "get_weather":
            raise KeyError(f"Unknown tool: {name}")
        return self.get_weather(arguments["location"], arguments.get("unit", "C"))

    def get_weather(self, location: str, unit: str = "C") -> dict:
        if unit not in ("C", "F"):
            raise ValueError(f"Unsupported unit: {unit}")
        self._call_count += 1
        self._location_call_counts[location] = self._location_call_counts.get(location, 0) + 1

        temperature = 0.0
        for city, temp in self.TEMPERATURES.items():
            if city in location:
                temperature = temp
                break

        return {
            "temp": temperature,
            "feels_like": 15,
            "temp_min": 8,
            "temp_max": 12,
            "pressure": 53,
            "humidity": 45,
            "unit": unit,
        }

    def get_total_call_count(self) -> int:
        return self._call_count

    def get_call_count_for_location(self, location: str) -> int:
        return self._location_call_counts.get(location, 0)

    def get_location_call_counts(self) -> dict[str, int]:
        return dict(self._location_call_counts)

    def reset(self) -> None:
        self._call_count = 0
        self._location_call_counts.clear()
