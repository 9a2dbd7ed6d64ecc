"""
health_check.py tests
"""

from unittest.mock import patch

from tool_call_bench.harness_config import HarnessConfig
from tool_call_bench.infrastructure.providers.ollama import OllamaProvider
from tool_call_bench.infrastructure.providers.openai_compatible import OpenAICompatibleProvider
from tool_call_bench.use_cases.health_check import (
    health_check_provider,
    health_check_providers,
)


def _provider(name, env_var):
    return OpenAICompatibleProvider(name, env_var, ["m1"], config=HarnessConfig())


class TestHealthCheckProvider:
    @patch.dict("os.environ", {"GROQ_API_KEY": "gsk-test"})
    def test_configured(self):
        result = health_check_provider(_provider("Groq", "GROQ_API_KEY"))
        assert result.success is True
        assert result.error is None
        assert result.provider_name == "Groq"

    @patch.dict("os.environ", {}, clear=True)
    def test_missing_key(self):
        result = health_check_provider(_provider("Groq", "GROQ_API_KEY"))
        assert result.success is False
        assert result.error == "API key not configured (Set GROQ_API_KEY)"

    @patch("tool_call_bench.infrastructure.providers.ollama.OllamaProvider.is_available", return_value=False)
    def test_local_runtime_unreachable(self, mock_available):
        result = health_check_provider(OllamaProvider(config=HarnessConfig()))
        assert result.success is False
        assert result.error == "Runtime not reachable"


class TestHealthCheckProviders:
    @patch.dict("os.environ", {"OPENAI_API_KEY": "sk-test"}, clear=True)
    def test_filters_available(self):
        groq = _provider("Groq", "GROQ_API_KEY")
        openai_provider = _provider("OpenAI", "OPENAI_API_KEY")

        available, results = health_check_providers([groq, openai_provider])

        assert available == [openai_provider]
        assert [r.success for r in results] == [False, True]
