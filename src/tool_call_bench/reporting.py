"""
Benchmark Reporting

Formats per-scenario tables, winner breakdowns, and the overall ranking as
text, and converts results to pandas DataFrames for CSV output.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

import pandas as pd

from tool_call_bench.domain.entities import BenchmarkResults, MasterReport, WinnerReport

logger = logging.getLogger(__name__)

HEADER = (
    f"{'Provider/Model':<35} {'Avg Time':>10} {'Success':>10} {'Accuracy':>10} "
    f"{'Avg Cost':>12} {'Tokens':>10} {'Calls':>10}"
)
RULE = "-" * 100
BANNER = "=" * 60


def format_report(benchmark: BenchmarkResults) -> str:
    """
    Render the results table of one scenario

    Columns: model, average time (ms), success rate (%), average accuracy (%),
    average cost ($, 6 decimals), average tokens, average tool calls.
    Models with errors get an extra line listing the distinct messages.
    """
    lines = [
        "",
        "=" * 40,
        f"BENCHMARK REPORT: {benchmark.scenario_name}",
        "=" * 40,
        "",
        HEADER,
        RULE,
    ]
    for tr in benchmark.results.values():
        lines.append(
            f"{tr.model_name:<35} "
            f"{tr.get_average_time():>9.0f}ms "
            f"{tr.get_success_rate() * 100:>9.0f}% "
            f"{tr.get_average_accuracy() * 100:>9.0f}% "
            f"${tr.get_average_cost():>11.6f} "
            f"{tr.get_average_tokens():>10.0f} "
            f"{tr.get_average_tool_calls():>10.0f}"
        )
        if tr.errors:
            lines.append(f"    Errors: {', '.join(tr.errors)}")
    return "\n".join(lines)


def format_winner(report: WinnerReport) -> str:
    """Render the winner, ranked score breakdown, and disqualified models"""
    lines = ["", "=== WINNER DETERMINATION ==="]

    if report.winner is None:
        lines.append("")
        lines.append("NO WINNER: All models failed completely")
        if report.failure_modes:
            lines.append("")
            lines.append("Failure modes (by average time):")
            for tr in report.failure_modes:
                errors = ", ".join(tr.errors) if tr.errors else "validation scored 0"
                lines.append(f"  {tr.model_name}: {tr.get_average_time():.0f}ms - {errors}")
        return "\n".join(lines)

    lines.append("")
    lines.append(f">>> WINNER: {report.winner} <<<")
    lines.append("")
    lines.append("Final Scores (max 100):")
    for s in report.scores:
        marker = " *" if s.model_name == report.winner else ""
        lines.append(
            f"  {s.model_name}: {s.total:.2f} "
            f"(reliability={s.reliability:.1f}, accuracy={s.accuracy:.1f}, "
            f"speed={s.speed:.1f}, cost={s.cost:.1f}){marker}"
        )

    if report.disqualified:
        lines.append("")
        lines.append(f"Disqualified (0% success): {', '.join(report.disqualified)}")
    return "\n".join(lines)


def format_overall(master: MasterReport) -> str:
    """Render the cross-scenario ranking"""
    lines = ["", BANNER, "OVERALL WINNER ACROSS ALL SCENARIOS", BANNER]
    for name, total in master.overall_scores.items():
        lines.append(f"{name}: {total:.2f}")
    lines.append("")
    if master.overall_winner is None:
        lines.append("NO OVERALL WINNER: no model succeeded in any scenario")
    else:
        lines.append(f">>> OVERALL CHEAPEST RELIABLE LLM: {master.overall_winner} <<<")
    return "\n".join(lines)


def log_report(text: str) -> None:
    """Emit a multi-line report through the module logger, one record per line"""
    for line in text.splitlines():
        logger.info(line)


def summary_dataframe(benchmark: BenchmarkResults) -> pd.DataFrame:
    """One row per model with the aggregated statistics"""
    rows = []
    for name, tr in benchmark.results.items():
        rows.append({
            "scenario": benchmark.scenario_name,
            "model_name": name,
            "num_runs": len(tr.runs),
            "avg_time_ms": tr.get_average_time(),
            "success_rate": tr.get_success_rate(),
            "avg_accuracy": tr.get_average_accuracy(),
            "avg_cost": tr.get_average_cost(),
            "avg_tokens": tr.get_average_tokens(),
            "avg_tool_calls": tr.get_average_tool_calls(),
            "errors": "; ".join(tr.errors),
        })
    return pd.DataFrame(rows, columns=[
        "scenario", "model_name", "num_runs", "avg_time_ms", "success_rate",
        "avg_accuracy", "avg_cost", "avg_tokens", "avg_tool_calls", "errors",
    ])


def runs_dataframe(benchmark: BenchmarkResults) -> pd.DataFrame:
    """One row per RunOutcome, numbered by iteration"""
    rows = []
    for name, tr in benchmark.results.items():
        for iteration, run in enumerate(tr.runs, start=1):
            rows.append({
                "scenario": benchmark.scenario_name,
                "model_name": name,
                "iteration": iteration,
                **asdict(run),
            })
    return pd.DataFrame(rows)


def save_results(
    benchmarks: list[BenchmarkResults],
    output_dir: str | Path,
    run_id: str,
) -> tuple[Path, Path]:
    """
    Save raw runs and per-model summaries of every scenario to CSV.

    Args:
        benchmarks: Scenario results
        output_dir: Directory for the CSV files (created if missing)
        run_id: Suffix of the file names

    Returns:
        (raw results path, summary path)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    raw_path = output_dir / f"raw_results_{run_id}.csv"
    summary_path = output_dir / f"summary_{run_id}.csv"

    raw_frames = [runs_dataframe(b) for b in benchmarks]
    summary_frames = [summary_dataframe(b) for b in benchmarks]
    raw_df = pd.concat(raw_frames, ignore_index=True) if raw_frames else pd.DataFrame()
    summary_df = pd.concat(summary_frames, ignore_index=True) if summary_frames else pd.DataFrame()

    raw_df.to_csv(raw_path, index=False)
    summary_df.to_csv(summary_path, index=False)
    return raw_path, summary_path
