"""OpenAI Chat Completions adapters (``general`` and ``reasoning`` providers)."""

import logging
from typing import Any, Optional

from .base_provider import BaseProvider
from .schemas import Message, ProviderId, ProviderResponse, RequestOptions, Role

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Calls the OpenAI Chat Completions API with the full message list."""

    provider_id = ProviderId.GENERAL

    def _build_messages(self, messages: list[Message], system_prompt: Optional[str]) -> list[dict]:
        payload = [m.to_dict() for m in messages]
        if system_prompt:
            payload.insert(0, {'role': Role.SYSTEM.value, 'content': system_prompt})
        return payload

    def _send(
        self,
        messages: list[Message],
        model: str,
        options: RequestOptions,
    ) -> ProviderResponse:
        call_kwargs: dict[str, Any] = {
            'model': model,
            'messages': self._build_messages(messages, options.system_prompt),
            'max_tokens': options.max_tokens,
            'temperature': options.temperature,
        }

        response = self._client.chat.completions.create(**call_kwargs)

        text = ''
        if response.choices and response.choices[0].message:
            text = response.choices[0].message.content or ''

        input_tokens: Optional[int] = None
        output_tokens: Optional[int] = None
        if response.usage:
            input_tokens = response.usage.prompt_tokens
            output_tokens = response.usage.completion_tokens

        return ProviderResponse(
            text=text,
            raw=response,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )


class DeepSeekProvider(OpenAIProvider):
    """DeepSeek speaks the OpenAI protocol; the client carries its base URL."""

    provider_id = ProviderId.REASONING
