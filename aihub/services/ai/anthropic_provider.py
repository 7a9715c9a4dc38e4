"""Anthropic Claude adapter for the ``safety`` provider."""

import logging
from typing import Any, Optional

from .base_provider import BaseProvider, split_system
from .schemas import Message, ProviderId, ProviderResponse, RequestOptions

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseProvider):
    """Calls the Anthropic Messages API.

    The Messages API takes the system prompt as a separate ``system`` field,
    so system-role messages are lifted out of the conversation.
    """

    provider_id = ProviderId.SAFETY

    def _send(
        self,
        messages: list[Message],
        model: str,
        options: RequestOptions,
    ) -> ProviderResponse:
        system, conversation = split_system(messages, options.system_prompt)

        call_kwargs: dict[str, Any] = {
            'model': model,
            'max_tokens': options.max_tokens,
            'temperature': options.temperature,
            'messages': [m.to_dict() for m in conversation],
        }
        if system:
            call_kwargs['system'] = system

        response = self._client.messages.create(**call_kwargs)

        text = ''
        for block in response.content or []:
            if block.type == 'text':
                text = block.text
                break

        input_tokens: Optional[int] = None
        output_tokens: Optional[int] = None
        if response.usage:
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
        else:
            logger.debug('Anthropic reply for %s carried no usage block', model)

        return ProviderResponse(
            text=text,
            raw=response,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
