"""Google Gemini adapter for the ``multimodal`` provider."""

import logging
from typing import Any, Optional

from .base_provider import BaseProvider, split_system
from .schemas import Message, ProviderId, ProviderResponse, RequestOptions, Role

logger = logging.getLogger(__name__)

# Gemini role mapping: internal -> Gemini
_ROLE_MAP = {
    Role.USER: 'user',
    Role.ASSISTANT: 'model',
}


def _to_content(msg: Message) -> dict:
    return {'role': _ROLE_MAP[msg.role], 'parts': [{'text': msg.content}]}


def build_chat_turn(messages: list[Message]) -> tuple[list[dict], str]:
    """Split a system-free conversation into chat history and the new turn.

    Every message except the last becomes history; the last message's
    content is the turn input (empty for an empty conversation).
    """
    history = [_to_content(m) for m in messages[:-1]]
    turn = messages[-1].content if messages else ''
    return history, turn


class GeminiProvider(BaseProvider):
    """Calls Gemini through a ``google-genai`` chat session.

    Unlike the other adapters this one does not submit the message list as
    is: it rebuilds a chat session from the earlier messages and sends only
    the last one.
    """

    provider_id = ProviderId.MULTIMODAL

    def _send(
        self,
        messages: list[Message],
        model: str,
        options: RequestOptions,
    ) -> ProviderResponse:
        system_instruction, conversation = split_system(messages, options.system_prompt)
        history, turn = build_chat_turn(conversation)

        config: dict[str, Any] = {
            'temperature': options.temperature,
            'max_output_tokens': options.max_tokens,
        }
        if system_instruction:
            config['system_instruction'] = system_instruction

        logger.debug('Gemini chat for %s: %d history message(s)', model, len(history))
        chat = self._client.chats.create(model=model, config=config, history=history)
        response = chat.send_message(turn)

        text = response.text or ''

        input_tokens: Optional[int] = None
        output_tokens: Optional[int] = None
        if getattr(response, 'usage_metadata', None):
            meta = response.usage_metadata
            input_tokens = getattr(meta, 'prompt_token_count', None)
            output_tokens = getattr(meta, 'candidates_token_count', None)

        return ProviderResponse(
            text=text,
            raw=response,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
