"""
Health Check

Reports which providers are configured before a benchmark starts.
"""

import logging

from tool_call_bench.domain.entities import HealthCheckResult
from tool_call_bench.infrastructure.providers.base import LlmProvider

logger = logging.getLogger(__name__)


def health_check_provider(provider: LlmProvider) -> HealthCheckResult:
    """
    Check a single provider's configuration.

    Args:
        provider: Provider adapter to check

    Returns:
        HealthCheckResult: Health check result
    """
    if provider.is_available():
        return HealthCheckResult(provider_name=provider.name, success=True, error=None)

    if provider.api_key_env_var:
        error = f"API key not configured (Set {provider.api_key_env_var})"
    else:
        error = "Runtime not reachable"
    return HealthCheckResult(provider_name=provider.name, success=False, error=error)


def health_check_providers(
    providers: list[LlmProvider],
) -> tuple[list[LlmProvider], list[HealthCheckResult]]:
    """
    Check every provider and log a one-line status for each.

    Args:
        providers: Provider adapters to check

    Returns:
        tuple: (list of available providers, list of all check results)
    """
    logger.info("=== Provider Health Check ===")
    results = []
    available = []

    for provider in providers:
        result = health_check_provider(provider)
        results.append(result)
        if result.success:
            logger.info("  %s... OK (%d models)", provider.name, len(provider.supported_models))
            available.append(provider)
        else:
            logger.warning("  %s... FAILED: %s", provider.name, result.error)

    return available, results
