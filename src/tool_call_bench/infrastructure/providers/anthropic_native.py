"""
Anthropic Claude provider (async Messages API)
"""

from __future__ import annotations

import logging

from anthropic import AsyncAnthropic

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

CLAUDE_MODELS = ["claude-haiku-4-5-20251001"]


def to_anthropic_tool(spec: ToolSpec) -> dict:
    return {
        "name": spec.name,
        "description": spec.description,
        "input_schema": spec.parameters or {"type": "object", "properties": {}},
    }


class AnthropicNativeSession(ChatSession):
    """Messages API session; tool_use blocks are answered with tool_result blocks"""

    def __init__(
        self,
        client: AsyncAnthropic,
        model: str,
        scenario: Scenario,
        model_config: ModelConfig,
    ):
        self.client = client
        self.model = model
        self.system_prompt = scenario.system_prompt
        self.tool_service = scenario.tool_service
        self.model_config = model_config
        self.messages: list[dict] = []
        self.tools = [to_anthropic_tool(spec) for spec in self.tool_service.tool_specs()]

    async def send(self, prompt: str) -> ChatResponse:
        self.messages.append({"role": "user", "content": prompt})

        prompt_tokens = 0
        completion_tokens = 0
        tool_calls = 0
        text = ""

        for _ in range(self.model_config.max_tool_rounds):
            kwargs = {}
            if self.system_prompt:
                kwargs["system"] = self.system_prompt
            if self.tools:
                kwargs["tools"] = self.tools
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.model_config.max_tokens,
                temperature=self.model_config.temperature,
                messages=self.messages,
                **kwargs,
            )

            # Retrieve token usage
            prompt_tokens += getattr(response.usage, "input_tokens", 0) or 0
            completion_tokens += getattr(response.usage, "output_tokens", 0) or 0

            self.messages.append({"role": "assistant", "content": response.content})
            text = "".join(block.text for block in response.content if block.type == "text")

            tool_uses = [block for block in response.content if block.type == "tool_use"]
            if not tool_uses:
                break

            results = []
            for block in tool_uses:
                tool_calls += 1
                results.append({
                    "type": "tool_result",
                    "tool_use_id": block.id,
                    "content": execute_tool_call(self.tool_service, block.name, block.input),
                })
            self.messages.append({"role": "user", "content": results})
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


class AnthropicNativeProvider(LlmProvider):
    """Claude models through the Anthropic API"""

    def __init__(
        self,
        supported_models: list[str] | None = None,
        pricing: PricingTable | None = None,
        config: HarnessConfig | None = None,
    ):
        super().__init__(
            name="AnthropicNative",
            api_key_env_var="ANTHROPIC_API_KEY",
            supported_models=supported_models or CLAUDE_MODELS,
            pricing=pricing,
            config=config,
            namespace="anthropic-native",
        )

    def create_session(self, model: str, scenario: Scenario) -> ChatSession:
        # SDK retries disabled: rate limits are retried by the benchmark engine
        client = AsyncAnthropic(api_key=self._require_api_key(), max_retries=0)
        return AnthropicNativeSession(client, model, scenario, self.config.model)
