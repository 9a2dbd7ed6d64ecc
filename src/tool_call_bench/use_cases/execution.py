"""
Benchmark Execution

Runs single trials under a hard deadline, retries rate-limited trials with
exponential backoff, and repeats trials per model with pacing between them.
"""

import asyncio
import logging
import time

from tool_call_bench.domain.constants import RATE_LIMIT_MARKERS
from tool_call_bench.domain.entities import ModelResults, RunOutcome
from tool_call_bench.domain.scenario import Scenario
from tool_call_bench.harness_config import HarnessConfig, load_config
from tool_call_bench.infrastructure.providers.base import LlmProvider, ProviderConfigurationError

logger = logging.getLogger(__name__)


def is_rate_limit_error(message: str | None) -> bool:
    """Whether an error message matches known provider rate-limit indicators"""
    if not message:
        return False
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


async def _run_trial(provider: LlmProvider, model: str, scenario: Scenario) -> RunOutcome:
    """
    Send every prompt of the scenario through one fresh session and grade the result.

    Provider errors are recorded on the returned RunOutcome. A
    ProviderConfigurationError is re-raised so the caller can skip the model.
    """
    run = RunOutcome()
    tool_service = scenario.tool_service
    num_prompts = len(scenario.prompts)

    try:
        session = provider.create_session(model, scenario)

        start_time = time.perf_counter()
        last_response = None
        try:
            for i, prompt in enumerate(scenario.prompts, start=1):
                logger.info("    Sending prompt %d/%d: %s", i, num_prompts, prompt[:50])
                try:
                    last_response = await session.send(prompt)
                except Exception as e:
                    logger.error("    Error on prompt %d: %s", i, e)
                    raise
                logger.info("    Received response for prompt %d", i)
                logger.info("    Tool calls so far: %d", tool_service.get_total_call_count())
        finally:
            # Also runs when the deadline cancels the trial
            await session.aclose()
        run.execution_time_ms = int((time.perf_counter() - start_time) * 1000)

        # Usage of the final prompt only; earlier turns are not accumulated
        run.prompt_tokens = last_response.prompt_tokens
        run.completion_tokens = last_response.completion_tokens
        pricing = provider.get_pricing(model)
        if pricing is not None:
            run.cost = pricing.calculate_cost(run.prompt_tokens, run.completion_tokens)

        accuracy = scenario.validate()
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"Validator returned accuracy {accuracy} outside [0, 1]")
        run.accuracy_score = accuracy
        run.success = run.accuracy_score > 0
        run.tool_calls_made = tool_service.get_total_call_count()

    except ProviderConfigurationError:
        raise
    except Exception as e:
        logger.error("Error in test run: %s", e)
        run.success = False
        run.error = str(e) or type(e).__name__

    return run


async def execute_single_run(
    provider: LlmProvider,
    model: str,
    scenario: Scenario,
    timeout_seconds: float,
) -> RunOutcome:
    """
    Execute one trial under a hard wall-clock deadline.

    The trial runs as a separate task; when the deadline passes the task is
    cancelled and awaited before the timeout outcome is returned.

    Args:
        provider: Provider adapter
        model: Model identifier (as listed by the provider)
        scenario: Scenario to run
        timeout_seconds: Deadline for the whole trial

    Returns:
        RunOutcome: Outcome of the trial (never raises for provider failures)

    Raises:
        ProviderConfigurationError: If the provider cannot create a session
    """
    try:
        return await asyncio.wait_for(
            _run_trial(provider, model, scenario),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error("Test run timed out after %g seconds", timeout_seconds)
        return RunOutcome(
            success=False,
            error=f"Timeout after {timeout_seconds:g} seconds",
            timed_out=True,
        )


async def run_with_retry(
    provider: LlmProvider,
    model: str,
    scenario: Scenario,
    config: HarnessConfig | None = None,
) -> RunOutcome:
    """
    Execute a trial, retrying only rate-limited failures with exponential backoff.

    Stops at the first attempt that succeeds, fails for any other reason, or
    exhausts config.retry.max_retries. The last attempt's outcome is returned.
    Cancelling the backoff pause aborts the retry loop.

    Args:
        provider: Provider adapter
        model: Model identifier
        scenario: Scenario to run
        config: HarnessConfig (loads from env if not provided)

    Returns:
        RunOutcome: Outcome of the last attempt
    """
    if config is None:
        config = load_config()

    max_retries = config.retry.max_retries
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1.")

    backoff_ms = config.retry.initial_backoff_ms
    run = None
    for attempt in range(1, max_retries + 1):
        run = await execute_single_run(provider, model, scenario, config.run.timeout_seconds)
        if run.success or run.timed_out or not is_rate_limit_error(run.error):
            break
        if attempt == max_retries:
            break

        logger.warning(
            "Rate limit hit, waiting %.1f seconds before retry %d/%d",
            backoff_ms / 1000, attempt, max_retries,
        )
        await asyncio.sleep(backoff_ms / 1000)
        backoff_ms *= 2

    return run


async def run_iterations(
    provider: LlmProvider,
    model: str,
    scenario: Scenario,
    config: HarnessConfig | None = None,
) -> ModelResults:
    """
    Run the retry-controlled trial config.run.iterations times, sequentially.

    The tool service is reset after every trial and a pacing delay separates
    consecutive iterations (skipped after the last one). Every outcome,
    successful or not, is recorded.

    Args:
        provider: Provider adapter
        model: Model identifier
        scenario: Scenario to run
        config: HarnessConfig (loads from env if not provided)

    Returns:
        ModelResults: One RunOutcome per iteration

    Raises:
        ProviderConfigurationError: If the provider cannot create a session
    """
    if config is None:
        config = load_config()

    full_model_name = provider.get_full_model_name(model)
    logger.info("Testing: %s", full_model_name)
    results = ModelResults(full_model_name)

    iterations = config.run.iterations
    delay = config.pacing.iteration_delay_seconds
    for i in range(iterations):
        logger.info("  Iteration %d/%d", i + 1, iterations)

        run = await run_with_retry(provider, model, scenario, config)
        results.add_run(run)

        scenario.tool_service.reset()

        if i < iterations - 1 and delay > 0:
            logger.info("  Waiting %g seconds before next iteration...", delay)
            await asyncio.sleep(delay)

    return results
