"""
OpenAI-compatible provider (OpenAI, Groq, DeepSeek, and other proxies)
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI

from tool_call_bench.domain.scenario import Scenario
from tool_call_bench.domain.value_objects import ChatResponse, ToolSpec
from tool_call_bench.harness_config import HarnessConfig, ModelConfig
from tool_call_bench.infrastructure.providers.base import (
    ChatSession,
    LlmProvider,
    execute_tool_call,
)
from tool_call_bench.pricing import PricingTable

logger = logging.getLogger(__name__)


def to_openai_tool(spec: ToolSpec) -> dict:
    """Convert a ToolSpec to the chat completions ``tools`` format"""
    return {
        "type": "function",
        "function": {
            "name": spec.name,
            "description": spec.description,
            "parameters": spec.parameters or {"type": "object", "properties": {}},
        },
    }


class OpenAICompatibleSession(ChatSession):
    """Chat completions session with a client-side tool loop"""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        scenario: Scenario,
        model_config: ModelConfig,
    ):
        self.client = client
        self.model = model
        self.tool_service = scenario.tool_service
        self.model_config = model_config
        self.messages: list[dict] = []
        if scenario.system_prompt:
            self.messages.append({"role": "system", "content": scenario.system_prompt})
        self.tools = [to_openai_tool(spec) for spec in self.tool_service.tool_specs()]

    async def send(self, prompt: str) -> ChatResponse:
        self.messages.append({"role": "user", "content": prompt})

        prompt_tokens = 0
        completion_tokens = 0
        tool_calls = 0
        text = ""

        for _ in range(self.model_config.max_tool_rounds):
            kwargs = {}
            if self.tools:
                kwargs["tools"] = self.tools
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self.messages,
                temperature=self.model_config.temperature,
                max_tokens=self.model_config.max_tokens,
                **kwargs,
            )

            if response.usage:
                prompt_tokens += response.usage.prompt_tokens or 0
                completion_tokens += response.usage.completion_tokens or 0

            message = response.choices[0].message
            text = message.content or ""

            if not message.tool_calls:
                self.messages.append({"role": "assistant", "content": text})
                break

            self.messages.append({
                "role": "assistant",
                "content": message.content,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {
                            "name": call.function.name,
                            "arguments": call.function.arguments,
                        },
                    }
                    for call in message.tool_calls
                ],
            })
            for call in message.tool_calls:
                tool_calls += 1
                self.messages.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": execute_tool_call(
                        self.tool_service, call.function.name, call.function.arguments
                    ),
                })
        else:
            logger.warning("    Tool loop for %s stopped after %d rounds", self.model, self.model_config.max_tool_rounds)

        return ChatResponse(
            text=text,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            tool_calls=tool_calls,
        )

    async def aclose(self) -> None:
        await self.client.close()


class OpenAICompatibleProvider(LlmProvider):
    """Provider reached through an OpenAI-compatible chat completions endpoint"""

    def __init__(
        self,
        name: str,
        api_key_env_var: str,
        supported_models: list[str],
        base_url: str | None = None,
        pricing: PricingTable | None = None,
        config: HarnessConfig | None = None,
        namespace: str | None = None,
    ):
        """
        Args:
            name: Display name (e.g. Groq)
            api_key_env_var: Environment variable holding the API key
            supported_models: Model identifiers to benchmark
            base_url: Endpoint (None for api.openai.com)
            pricing: Pricing table
            config: HarnessConfig
            namespace: Full model name prefix (e.g. "deepseek" to share pricing keys)
        """
        super().__init__(name, api_key_env_var, supported_models, pricing, config, namespace)
        self.base_url = base_url

    def _make_client(self) -> AsyncOpenAI:
        # SDK retries disabled: rate limits are retried by the benchmark engine
        return AsyncOpenAI(
            base_url=self.base_url,
            api_key=self._require_api_key(),
            max_retries=0,
        )

    def create_session(self, model: str, scenario: Scenario) -> ChatSession:
        return OpenAICompatibleSession(self._make_client(), model, scenario, self.config.model)
