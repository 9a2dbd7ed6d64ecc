"""
Google Gemini provider (Google GenAI SDK, async client)
"""

from __future__ import annotations

import json
import logging

from google import genai
from google.genai import types

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

GEMINI_MODELS = ["gemini-2.0-flash", "gemini-2.0-flash-lite"]


def to_function_declaration(spec: ToolSpec) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=spec.name,
        description=spec.description,
        parameters_json_schema=spec.parameters or {"type": "object", "properties": {}},
    )


class GoogleNativeSession(ChatSession):
    """Gemini chat with automatic function calling disabled so calls are counted here"""

    def __init__(
        self,
        client: genai.Client,
        model: str,
        scenario: Scenario,
        model_config: ModelConfig,
    ):
        self.client = client
        self.model = model
        self.tool_service = scenario.tool_service
        self.model_config = model_config

        specs = self.tool_service.tool_specs()
        config = types.GenerateContentConfig(
            system_instruction=scenario.system_prompt or None,
            temperature=model_config.temperature,
            max_output_tokens=model_config.max_tokens,
            tools=[types.Tool(function_declarations=[to_function_declaration(s) for s in specs])] if specs else None,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )
        self.chat = client.aio.chats.create(model=model, config=config)

    async def send(self, prompt: str) -> ChatResponse:
        prompt_tokens = 0
        completion_tokens = 0
        tool_calls = 0
        text = ""

        message: str | list[types.Part] = prompt
        for _ in range(self.model_config.max_tool_rounds):
            response = await self.chat.send_message(message)

            if response.usage_metadata:
                prompt_tokens += response.usage_metadata.prompt_token_count or 0
                completion_tokens += response.usage_metadata.candidates_token_count or 0

            function_calls = response.function_calls or []
            if not function_calls:
                text = response.text or ""
                break

            parts = []
            for call in function_calls:
                tool_calls += 1
                content = execute_tool_call(self.tool_service, call.name, call.args or {})
                parts.append(
                    types.Part.from_function_response(
                        name=call.name,
                        response={"result": json.loads(content)},
                    )
                )
            message = parts
        else:
            logger.warning("    Tool loop for %s stopped after %d rounds", self.model, self.model_config.max_tool_rounds)

        return ChatResponse(
            text=text,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            tool_calls=tool_calls,
        )

    async def aclose(self) -> None:
        await self.client.aio.aclose()


class GoogleNativeProvider(LlmProvider):
    """Gemini models through the Gemini Developer API"""

    def __init__(
        self,
        supported_models: list[str] | None = None,
        pricing: PricingTable | None = None,
        config: HarnessConfig | None = None,
    ):
        super().__init__(
            name="GoogleNative",
            api_key_env_var="GEMINI_API_KEY",
            supported_models=supported_models or GEMINI_MODELS,
            pricing=pricing,
            config=config,
            namespace="google-native",
        )

    def create_session(self, model: str, scenario: Scenario) -> ChatSession:
        client = genai.Client(api_key=self._require_api_key())
        return GoogleNativeSession(client, model, scenario, self.config.model)
