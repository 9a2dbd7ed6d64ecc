"""
Composite Scoring and Winner Selection

Scores viable models (at least one successful run) on reliability, accuracy,
speed, and cost, and picks the winner per scenario and across scenarios.
"""

from __future__ import annotations

from tool_call_bench.domain.constants import (
    ACCURACY_WEIGHT,
    COST_REFERENCE_USD,
    COST_SCORE_CAP,
    RELIABILITY_WEIGHT,
    SPEED_REFERENCE_MS,
    SPEED_SCORE_CAP,
)
from tool_call_bench.domain.entities import (
    BenchmarkResults,
    ModelResults,
    ScoreBreakdown,
    WinnerReport,
)


def is_viable(results: ModelResults) -> bool:
    return results.get_success_rate() > 0


def calculate_score(results: ModelResults) -> ScoreBreakdown:
    """
    Calculate the composite score (max 100)

    reliability = success_rate * 50
    accuracy    = average_accuracy * 30
    speed       = min(15, 15000 / average_time_ms), 0 when no timing
    cost        = min(5, 0.05 / average_cost), 5 when free

    Speed and cost are capped so a fast or cheap but unreliable model cannot
    outscore a reliable one.

    Args:
        results: Aggregated runs of one model

    Returns:
        ScoreBreakdown
    """
    average_time = results.get_average_time()
    average_cost = results.get_average_cost()

    speed = min(SPEED_SCORE_CAP, SPEED_REFERENCE_MS / average_time) if average_time > 0 else 0.0
    cost = min(COST_SCORE_CAP, COST_REFERENCE_USD / average_cost) if average_cost > 0 else COST_SCORE_CAP

    return ScoreBreakdown(
        model_name=results.model_name,
        reliability=results.get_success_rate() * RELIABILITY_WEIGHT,
        accuracy=results.get_average_accuracy() * ACCURACY_WEIGHT,
        speed=speed,
        cost=cost,
    )


def determine_winner(benchmark: BenchmarkResults) -> WinnerReport:
    """
    Score every viable model of a scenario and pick the highest total.

    Ties go to the model benchmarked first (insertion order). Models with a
    0% success rate are disqualified and never scored. When no model is
    viable, the report lists every model's failures ordered by average time.

    Args:
        benchmark: Results of one scenario

    Returns:
        WinnerReport
    """
    viable = [r for r in benchmark.results.values() if is_viable(r)]
    disqualified = [name for name, r in benchmark.results.items() if not is_viable(r)]

    if not viable:
        failure_modes = sorted(benchmark.results.values(), key=lambda r: r.get_average_time())
        return WinnerReport(
            scenario_name=benchmark.scenario_name,
            winner=None,
            scores=[],
            disqualified=disqualified,
            failure_modes=failure_modes,
        )

    # sorted() is stable, so equal totals keep benchmark order
    scores = sorted((calculate_score(r) for r in viable), key=lambda s: s.total, reverse=True)
    return WinnerReport(
        scenario_name=benchmark.scenario_name,
        winner=scores[0].model_name,
        scores=scores,
        disqualified=disqualified,
    )


def rank_overall(benchmarks: list[BenchmarkResults]) -> dict[str, float]:
    """
    Sum each model's per-scenario score across scenarios.

    A scenario where a model is disqualified contributes nothing for it.

    Args:
        benchmarks: Results of each scenario, in run order

    Returns:
        {full model name: summed score}, highest first (ties in first-seen order)
    """
    totals: dict[str, float] = {}
    for benchmark in benchmarks:
        for name, results in benchmark.results.items():
            if is_viable(results):
                totals[name] = totals.get(name, 0.0) + calculate_score(results).total

    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


def select_overall_winner(overall_scores: dict[str, float]) -> str | None:
    """Highest summed score, or None when no model was viable in any scenario"""
    if not overall_scores:
        return None
    return max(overall_scores.items(), key=lambda item: item[1])[0]
