"""Abstract base class for AI provider adapters."""

import abc
from typing import Any, Iterable, Optional, Union

from aihub.services.base import UpstreamError

from .pricing import calculate_cost, get_price
from .schemas import AIResponse, Message, ProviderId, ProviderResponse, RequestOptions, Role, TokenUsage
from .tiers import model_for

MessageLike = Union[Message, dict]


def as_messages(messages: Iterable[MessageLike]) -> list[Message]:
    """Normalise a sequence of :class:`Message` objects or role/content dicts."""
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in messages]


def split_system(
    messages: list[Message], system_prompt: Optional[str] = None
) -> tuple[Optional[str], list[Message]]:
    """Split *messages* into merged system content and the remaining conversation.

    *system_prompt* comes first, followed by every system message in order,
    joined by newlines. Returns ``None`` when there is no system content.
    """
    system_parts: list[str] = [system_prompt] if system_prompt else []
    conversation: list[Message] = []
    for msg in messages:
        if msg.role is Role.SYSTEM:
            system_parts.append(msg.content)
        else:
            conversation.append(msg)
    system = '\n'.join(system_parts) if system_parts else None
    return system, conversation


class BaseProvider(abc.ABC):
    """Interface that every provider adapter must implement.

    Adapters receive a ready SDK client at construction and never build one
    themselves. :meth:`call` holds the behaviour shared by all providers
    (model resolution, usage defaults, cost, error wrapping); subclasses only
    translate to and from the upstream's native shape in :meth:`_send`.
    """

    #: The :class:`ProviderId` this adapter answers for.
    provider_id: ProviderId

    def __init__(self, client: Any) -> None:
        self._client = client

    def call(
        self,
        messages: Iterable[MessageLike],
        options: Optional[RequestOptions] = None,
    ) -> AIResponse:
        """Send *messages* upstream and return a normalised :class:`AIResponse`.

        Raises:
            :class:`~aihub.services.base.UpstreamError`: When the upstream call
                fails or its reply cannot be read.
        """
        options = options or RequestOptions()
        messages = as_messages(messages)
        model = options.model or model_for(self.provider_id, options.tier)

        try:
            result = self._send(messages, model, options)
            input_tokens = int(result.input_tokens or 0)
            output_tokens = int(result.output_tokens or 0)
            if input_tokens < 0 or output_tokens < 0:
                raise ValueError(f'negative token usage reported: {input_tokens}/{output_tokens}')
            text = result.text or ''
        except Exception as exc:
            raise UpstreamError(self.provider_id, model, exc) from exc

        cost = calculate_cost(input_tokens, output_tokens, get_price(self.provider_id, model))

        return AIResponse(
            content=text,
            provider=self.provider_id,
            model=model,
            tokens_used=TokenUsage(input=input_tokens, output=output_tokens),
            cost=float(cost),
        )

    @abc.abstractmethod
    def _send(
        self,
        messages: list[Message],
        model: str,
        options: RequestOptions,
    ) -> ProviderResponse:
        """Invoke the upstream and return its reply as a :class:`ProviderResponse`.

        Args:
            messages: Full conversation, system messages included.
            model: Provider-side model identifier.
            options: Request options (``max_tokens``, ``temperature``, ``system_prompt``).

        Returns:
            :class:`ProviderResponse` with ``text``, ``raw``, and token counts;
            token counts are ``None`` when the upstream omits them.
        """
