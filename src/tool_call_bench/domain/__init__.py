"""
Domain Layer

Defines constants, entities, value objects, and scenario contracts that form
the core of the benchmark. Has no dependencies on external libraries.
"""

from tool_call_bench.domain.constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_TIMEOUT_SECONDS,
    INITIAL_BACKOFF_MS,
    MAX_RETRIES,
    MODEL_PRICING,
    RATE_LIMIT_DELAY_SECONDS,
    RATE_LIMIT_MARKERS,
)
from tool_call_bench.domain.entities import (
    BenchmarkResults,
    HealthCheckResult,
    MasterReport,
    ModelResults,
    RunOutcome,
    ScoreBreakdown,
    WinnerReport,
)
from tool_call_bench.domain.scenario import (
    Resettable,
    Scenario,
    ToolService,
)
from tool_call_bench.domain.value_objects import (
    ApiCall,
    ChatResponse,
    ModelPricing,
    ToolSpec,
)

__all__ = [
    # constants
    "DEFAULT_ITERATIONS",
    "DEFAULT_TIMEOUT_SECONDS",
    "INITIAL_BACKOFF_MS",
    "MAX_RETRIES",
    "MODEL_PRICING",
    "RATE_LIMIT_DELAY_SECONDS",
    "RATE_LIMIT_MARKERS",
    # entities
    "BenchmarkResults",
    "HealthCheckResult",
    "MasterReport",
    "ModelResults",
    "RunOutcome",
    "ScoreBreakdown",
    "WinnerReport",
    # scenario
    "Resettable",
    "Scenario",
    "ToolService",
    # value objects
    "ApiCall",
    "ChatResponse",
    "ModelPricing",
    "ToolSpec",
]
