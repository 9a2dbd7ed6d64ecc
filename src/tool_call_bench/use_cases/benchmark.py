"""
Benchmark Runner

Drives every (provider x model) combination through a scenario, then ranks
models per scenario and across scenarios.
"""

from __future__ import annotations

import asyncio
import logging

from tool_call_bench.domain.entities import BenchmarkResults, MasterReport
from tool_call_bench.domain.scenario import Scenario
from tool_call_bench.harness_config import HarnessConfig, load_config
from tool_call_bench.infrastructure.providers.base import LlmProvider, ProviderConfigurationError
from tool_call_bench.reporting import BANNER, format_overall, format_report, format_winner, log_report
from tool_call_bench.scenarios import create_master_scenarios
from tool_call_bench.use_cases.execution import run_iterations
from tool_call_bench.use_cases.scoring import determine_winner, rank_overall, select_overall_winner

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """
    Sequential benchmark over a fixed provider list

    Providers, models, and iterations all run one at a time so request pacing
    stays within provider rate limits.
    """

    def __init__(self, providers: list[LlmProvider], config: HarnessConfig | None = None) -> None:
        self.providers = providers
        self.config = config if config is not None else load_config()

    async def run_benchmark(self, scenario: Scenario) -> BenchmarkResults:
        """
        Benchmark every available, priced, tool-calling model on one scenario.

        Unavailable providers, models without pricing, models that do not
        support tool calling, and models whose provider raises a
        configuration error are skipped and get no entry in the results.

        Args:
            scenario: Scenario to run

        Returns:
            BenchmarkResults: ModelResults per full model name, in run order
        """
        logger.info("")
        logger.info("=== BENCHMARK: %s ===", scenario.name)

        results = BenchmarkResults(scenario.name)

        for provider in self.providers:
            # Availability may probe a local runtime over blocking HTTP
            if not await asyncio.to_thread(provider.is_available):
                logger.warning(
                    "Skipping %s - API key not configured (Set %s)",
                    provider.name, provider.api_key_env_var,
                )
                continue

            for model in provider.get_supported_models():
                full_model_name = provider.get_full_model_name(model)

                pricing = provider.get_pricing(model)
                if pricing is None:
                    logger.warning("Skipping %s - pricing not configured", full_model_name)
                    continue
                if not pricing.supports_tool_calling:
                    logger.info("Skipping %s - does not support tool calling", full_model_name)
                    continue

                try:
                    model_results = await run_iterations(provider, model, scenario, self.config)
                except ProviderConfigurationError as e:
                    logger.warning("Skipping %s - %s", full_model_name, e)
                    scenario.tool_service.reset()
                    continue

                results.add_result(full_model_name, model_results)

        return results

    async def run_master_benchmark(self, scenarios: list[Scenario] | None = None) -> MasterReport:
        """
        Run several scenarios and rank models by their summed scores.

        Each scenario's table and winner breakdown is logged as it finishes.

        Args:
            scenarios: Scenarios in run order (defaults to the built-in
                simple and complex mixing-console scenarios)

        Returns:
            MasterReport
        """
        logger.info(BANNER)
        logger.info("MASTER BENCHMARK: Finding Cheapest LLM for Tool Calling")
        logger.info(BANNER)

        if scenarios is None:
            scenarios = create_master_scenarios()

        scenario_results = []
        winner_reports = []
        for scenario in scenarios:
            benchmark = await self.run_benchmark(scenario)
            winner_report = determine_winner(benchmark)
            log_report(format_report(benchmark))
            log_report(format_winner(winner_report))
            scenario_results.append(benchmark)
            winner_reports.append(winner_report)

        overall_scores = rank_overall(scenario_results)
        master = MasterReport(
            scenario_results=scenario_results,
            winner_reports=winner_reports,
            overall_scores=overall_scores,
            overall_winner=select_overall_winner(overall_scores),
        )
        log_report(format_overall(master))
        return master

