"""
execution.py tests

Single-run deadline, rate-limit retry with backoff, and the iteration loop.
Backoff and pacing sleeps are patched except in the deadline and cancellation tests.
"""

import asyncio
import time
from unittest.mock import AsyncMock, call, patch

import pytest

from tool_call_bench.domain.scenario import Scenario
from tool_call_bench.domain.value_objects import ChatResponse
from tool_call_bench.harness_config import HarnessConfig
from tool_call_bench.infrastructure.providers.base import (
    ChatSession,
    LlmProvider,
    ProviderConfigurationError,
)
from tool_call_bench.pricing import build_pricing_table
from tool_call_bench.tool_services import MockWeatherService
from tool_call_bench.use_cases.execution import (
    execute_single_run,
    is_rate_limit_error,
    run_iterations,
    run_with_retry,
)

SLEEP = "tool_call_bench.use_cases.execution.asyncio.sleep"


class ScriptedSession(ChatSession):
    """Calls the weather tool once per prompt, or fails/stalls as scripted"""

    def __init__(self, tool_service, error=None, stall_seconds=0.0, tokens=(100, 20), call_tool_first=False):
        self.tool_service = tool_service
        self.error = error
        self.call_tool_first = call_tool_first
        self.stall_seconds = stall_seconds
        self.tokens = tokens
        self.cancelled = False
        self.closed = False

    async def send(self, prompt):
        if self.stall_seconds:
            try:
                await asyncio.sleep(self.stall_seconds)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            if self.call_tool_first:
                self.tool_service.get_weather("Tokyo")
            raise self.error
        self.tool_service.get_weather("Tokyo")
        return ChatResponse(text="ok", prompt_tokens=self.tokens[0], completion_tokens=self.tokens[1], tool_calls=1)

    async def aclose(self):
        self.closed = True


class FakeProvider(LlmProvider):
    """Provider whose sessions come from a list of scripted behaviours"""

    def __init__(self, behaviours, pricing=None):
        super().__init__(
            "Fake",
            "FAKE_API_KEY",
            ["m1"],
            pricing=pricing or build_pricing_table({"fake/m1": {"input": 1.0, "output": 2.0}}),
            config=HarnessConfig(),
        )
        self.behaviours = list(behaviours)
        self.sessions = []

    def is_available(self):
        return True

    def create_session(self, model, scenario):
        behaviour = self.behaviours.pop(0) if len(self.behaviours) > 1 else self.behaviours[0]
        if isinstance(behaviour, ProviderConfigurationError):
            raise behaviour
        session = ScriptedSession(scenario.tool_service, **behaviour)
        self.sessions.append(session)
        return session


def _scenario(service=None, prompts=("What's the weather in Tokyo?",)):
    service = service or MockWeatherService()
    return Scenario(
        name="weather",
        prompts=prompts,
        tool_service=service,
        validate=lambda: 1.0 if service.get_total_call_count() > 0 else 0.0,
    )


def _config(**overrides):
    data = {"run": {"iterations": 1, "timeout_seconds": 5}, "pacing": {"iteration_delay_seconds": 10.0}}
    for key, value in overrides.items():
        data.setdefault(key, {}).update(value)
    return HarnessConfig.from_dict(data)


class TestIsRateLimitError:
    @pytest.mark.parametrize("message", [
        "Error code: 429",
        "rate_limit_exceeded: slow down",
        "HTTP 429 Too Many Requests",
        "Too Many Requests",
    ])
    def test_rate_limit_messages(self, message):
        assert is_rate_limit_error(message) is True

    @pytest.mark.parametrize("message", [None, "", "Invalid API key", "Internal Server Error"])
    def test_other_messages(self, message):
        assert is_rate_limit_error(message) is False


class TestExecuteSingleRun:
    def test_successful_run(self):
        service = MockWeatherService()
        scenario = _scenario(service, prompts=("first", "second"))
        provider = FakeProvider([{"tokens": (1_000_000, 500_000)}])

        run = asyncio.run(execute_single_run(provider, "m1", scenario, 5))

        assert run.success is True
        assert run.error is None
        assert run.accuracy_score == 1.0
        assert run.tool_calls_made == 2
        assert run.prompt_tokens == 1_000_000
        assert run.completion_tokens == 500_000
        assert run.cost == pytest.approx(2.0)
        assert run.execution_time_ms >= 0

    def test_zero_accuracy_is_failure(self):
        scenario = Scenario(name="s", prompts=("p",), tool_service=MockWeatherService(), validate=lambda: 0.0)
        run = asyncio.run(execute_single_run(FakeProvider([{}]), "m1", scenario, 5))
        assert run.success is False
        assert run.error is None

    def test_out_of_range_accuracy_is_an_error(self):
        scenario = Scenario(name="s", prompts=("p",), tool_service=MockWeatherService(), validate=lambda: 1.5)
        run = asyncio.run(execute_single_run(FakeProvider([{}]), "m1", scenario, 5))
        assert run.success is False
        assert "outside [0, 1]" in run.error

    def test_provider_error_is_recorded(self):
        provider = FakeProvider([{"error": RuntimeError("Invalid API key")}])
        run = asyncio.run(execute_single_run(provider, "m1", _scenario(), 5))
        assert run.success is False
        assert run.error == "Invalid API key"
        assert run.timed_out is False

    def test_empty_error_message_uses_type_name(self):
        provider = FakeProvider([{"error": RuntimeError()}])
        run = asyncio.run(execute_single_run(provider, "m1", _scenario(), 5))
        assert run.error == "RuntimeError"

    def test_configuration_error_propagates(self):
        provider = FakeProvider([ProviderConfigurationError("API key not found for Fake")])
        with pytest.raises(ProviderConfigurationError):
            asyncio.run(execute_single_run(provider, "m1", _scenario(), 5))

    def test_timeout(self):
        provider = FakeProvider([{"stall_seconds": 5.0}])

        start = time.monotonic()
        run = asyncio.run(execute_single_run(provider, "m1", _scenario(), 0.2))
        elapsed = time.monotonic() - start

        assert run.success is False
        assert run.timed_out is True
        assert run.error == "Timeout after 0.2 seconds"
        assert elapsed < 2.0
        # the stalled call was cancelled, not left running
        assert provider.sessions[0].cancelled is True

    def test_session_closed_after_success(self):
        provider = FakeProvider([{}])
        asyncio.run(execute_single_run(provider, "m1", _scenario(), 5))
        assert provider.sessions[0].closed is True

    def test_session_closed_after_provider_error(self):
        provider = FakeProvider([{"error": RuntimeError("Invalid API key")}])
        asyncio.run(execute_single_run(provider, "m1", _scenario(), 5))
        assert provider.sessions[0].closed is True

    def test_session_closed_after_timeout(self):
        provider = FakeProvider([{"stall_seconds": 5.0}])
        run = asyncio.run(execute_single_run(provider, "m1", _scenario(), 0.2))
        assert run.timed_out is True
        assert provider.sessions[0].closed is True

    def test_timeout_message_for_whole_seconds(self):
        provider = FakeProvider([{"stall_seconds": 5.0}])
        run = asyncio.run(execute_single_run(provider, "m1", _scenario(), 1))
        assert run.error == "Timeout after 1 seconds"


class TestRunWithRetry:
    @patch(SLEEP, new_callable=AsyncMock)
    def test_success_on_first_attempt(self, mock_sleep):
        provider = FakeProvider([{}])
        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))
        assert run.success is True
        assert len(provider.sessions) == 1
        mock_sleep.assert_not_called()

    @patch(SLEEP, new_callable=AsyncMock)
    def test_rate_limit_retried_with_backoff(self, mock_sleep):
        rate_limited = {"error": RuntimeError("Error code: 429 - rate_limit_exceeded")}
        provider = FakeProvider([rate_limited, rate_limited, rate_limited])

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))

        assert run.success is False
        assert "429" in run.error
        assert len(provider.sessions) == 3
        assert mock_sleep.await_args_list == [call(1.0), call(2.0)]

    @patch(SLEEP, new_callable=AsyncMock)
    def test_rate_limit_then_success(self, mock_sleep):
        provider = FakeProvider([{"error": RuntimeError("Too Many Requests")}, {}])

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))

        assert run.success is True
        assert len(provider.sessions) == 2
        mock_sleep.assert_awaited_once_with(1.0)

    @patch(SLEEP, new_callable=AsyncMock)
    def test_success_on_last_attempt(self, mock_sleep):
        rate_limited = {"error": RuntimeError("Error code: 429")}
        provider = FakeProvider([rate_limited, rate_limited, {}])

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))

        assert run.success is True
        assert run.error is None
        assert len(provider.sessions) == 3
        assert mock_sleep.await_args_list == [call(1.0), call(2.0)]

    @patch(SLEEP, new_callable=AsyncMock)
    def test_tool_calls_carry_over_between_retries(self, mock_sleep):
        # the tool service is only reset between iterations, not attempts
        provider = FakeProvider([{"error": RuntimeError("429"), "call_tool_first": True}, {}])

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))

        assert run.success is True
        assert run.tool_calls_made == 2

    def test_cancel_during_backoff_aborts_retries(self):
        provider = FakeProvider([{"error": RuntimeError("429")}, {}])
        config = _config(retry={"initial_backoff_ms": 5000})

        async def cancel_while_waiting():
            task = asyncio.create_task(run_with_retry(provider, "m1", _scenario(), config))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        start = time.monotonic()
        asyncio.run(cancel_while_waiting())

        assert time.monotonic() - start < 2.0
        assert len(provider.sessions) == 1

    @patch(SLEEP, new_callable=AsyncMock)
    def test_other_errors_not_retried(self, mock_sleep):
        provider = FakeProvider([{"error": RuntimeError("Invalid API key")}, {}])

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), _config()))

        assert run.success is False
        assert run.error == "Invalid API key"
        assert len(provider.sessions) == 1
        mock_sleep.assert_not_called()

    @patch(SLEEP, new_callable=AsyncMock)
    def test_backoff_follows_config(self, mock_sleep):
        rate_limited = {"error": RuntimeError("429")}
        provider = FakeProvider([rate_limited] * 4)
        config = _config(retry={"max_retries": 4, "initial_backoff_ms": 500})

        asyncio.run(run_with_retry(provider, "m1", _scenario(), config))

        assert len(provider.sessions) == 4
        assert mock_sleep.await_args_list == [call(0.5), call(1.0), call(2.0)]

    def test_timeout_not_retried(self):
        provider = FakeProvider([{"stall_seconds": 5.0}])
        config = _config(run={"timeout_seconds": 1})
        config.run.timeout_seconds = 0.2

        run = asyncio.run(run_with_retry(provider, "m1", _scenario(), config))

        assert run.timed_out is True
        assert len(provider.sessions) == 1

    def test_invalid_max_retries(self):
        config = HarnessConfig()
        config.retry.max_retries = 0
        with pytest.raises(ValueError, match="max_retries"):
            asyncio.run(run_with_retry(FakeProvider([{}]), "m1", _scenario(), config))


class TestRunIterations:
    @patch(SLEEP, new_callable=AsyncMock)
    def test_records_every_iteration(self, mock_sleep):
        provider = FakeProvider([{}, {"error": RuntimeError("Invalid API key")}, {}])
        config = _config(run={"iterations": 3})

        results = asyncio.run(run_iterations(provider, "m1", _scenario(), config))

        assert results.model_name == "fake/m1"
        assert len(results.runs) == 3
        assert results.get_success_rate() == pytest.approx(2 / 3)
        assert results.errors == ["Invalid API key"]

    @patch(SLEEP, new_callable=AsyncMock)
    def test_pacing_skipped_after_last_iteration(self, mock_sleep):
        config = _config(run={"iterations": 3})
        asyncio.run(run_iterations(FakeProvider([{}]), "m1", _scenario(), config))
        assert mock_sleep.await_args_list == [call(10.0), call(10.0)]

    def test_cancel_during_pacing_aborts_iterations(self):
        provider = FakeProvider([{}])
        config = _config(run={"iterations": 3})

        async def cancel_while_pacing():
            task = asyncio.create_task(run_iterations(provider, "m1", _scenario(), config))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        start = time.monotonic()
        asyncio.run(cancel_while_pacing())

        assert time.monotonic() - start < 2.0
        assert len(provider.sessions) == 1

    @patch(SLEEP, new_callable=AsyncMock)
    def test_single_iteration_has_no_pacing(self, mock_sleep):
        asyncio.run(run_iterations(FakeProvider([{}]), "m1", _scenario(), _config()))
        mock_sleep.assert_not_called()

    @patch(SLEEP, new_callable=AsyncMock)
    def test_zero_delay_disables_pacing(self, mock_sleep):
        config = _config(run={"iterations": 2}, pacing={"iteration_delay_seconds": 0})
        asyncio.run(run_iterations(FakeProvider([{}]), "m1", _scenario(), config))
        mock_sleep.assert_not_called()

    @patch(SLEEP, new_callable=AsyncMock)
    def test_tool_service_reset_between_iterations(self, mock_sleep):
        service = MockWeatherService()
        config = _config(run={"iterations": 2})

        results = asyncio.run(run_iterations(FakeProvider([{}]), "m1", _scenario(service), config))

        # each run only sees its own call
        assert [r.tool_calls_made for r in results.runs] == [1, 1]
        assert service.get_total_call_count() == 0

    @patch(SLEEP, new_callable=AsyncMock)
    def test_configuration_error_propagates(self, mock_sleep):
        provider = FakeProvider([ProviderConfigurationError("API key not found for Fake")])
        with pytest.raises(ProviderConfigurationError):
            asyncio.run(run_iterations(provider, "m1", _scenario(), _config(run={"iterations": 2})))
