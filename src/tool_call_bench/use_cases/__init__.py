"""
Use Cases Layer

Aggregates the benchmark engine: trial execution, retries, iteration,
scoring, and provider health checks.
"""

from tool_call_bench.use_cases.benchmark import BenchmarkRunner
from tool_call_bench.use_cases.execution import (
    execute_single_run,
    is_rate_limit_error,
    run_iterations,
    run_with_retry,
)
from tool_call_bench.use_cases.health_check import (
    health_check_provider,
    health_check_providers,
)
from tool_call_bench.use_cases.scoring import (
    calculate_score,
    determine_winner,
    is_viable,
    rank_overall,
    select_overall_winner,
)

__all__ = [
    # benchmark
    "BenchmarkRunner",
    # execution
    "execute_single_run",
    "is_rate_limit_error",
    "run_iterations",
    "run_with_retry",
    # health_check
    "health_check_provider",
    "health_check_providers",
    # scoring
    "calculate_score",
    "determine_winner",
    "is_viable",
    "rank_overall",
    "select_overall_winner",
]
