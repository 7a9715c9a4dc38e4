"""AI Router – selects a provider for each conversation and delegates to its adapter."""

import functools
import logging
import time
from typing import Any, Iterable, Optional

from aihub.services.base import ServiceNotConfigured, UpstreamError

from .anthropic_provider import AnthropicProvider
from .base_provider import BaseProvider, MessageLike, as_messages
from .gemini_provider import GeminiProvider
from .openai_provider import DeepSeekProvider, OpenAIProvider
from .schemas import AIResponse, Message, ProviderId, RequestOptions, Role
from .selector import ProviderSelector

logger = logging.getLogger(__name__)

_PROVIDER_CLASSES: dict[ProviderId, type[BaseProvider]] = {
    ProviderId.SAFETY: AnthropicProvider,
    ProviderId.GENERAL: OpenAIProvider,
    ProviderId.REASONING: DeepSeekProvider,
    ProviderId.MULTIMODAL: GeminiProvider,
}


class AIRouter:
    """Central entry-point for all AI calls.

    Usage::

        router = AIRouter.from_settings()
        response = router.route([Message(Role.USER, 'Hello!')])
        response = router.generate('Summarise this text: …')

    The router holds no per-request state. It performs exactly one upstream
    call per request: no retries and no fallback to another provider, so an
    :class:`~aihub.services.base.UpstreamError` from the chosen adapter is
    terminal for that request.
    """

    def __init__(
        self,
        providers: dict[ProviderId, BaseProvider],
        selector: Optional[ProviderSelector] = None,
    ) -> None:
        """
        Args:
            providers: Adapter per provider id, built with injected clients.
            selector: Strategy used when no provider is requested explicitly.
        """
        self._providers = dict(providers)
        self.selector = selector or ProviderSelector()

    @classmethod
    def from_clients(
        cls,
        clients: dict[ProviderId, Any],
        selector: Optional[ProviderSelector] = None,
    ) -> 'AIRouter':
        """Wrap each SDK client in the adapter for its provider."""
        providers = {
            ProviderId(provider): _PROVIDER_CLASSES[ProviderId(provider)](client)
            for provider, client in clients.items()
        }
        return cls(providers, selector=selector)

    @classmethod
    def from_settings(cls, selector: Optional[ProviderSelector] = None) -> 'AIRouter':
        """Build clients from Django settings and wrap them in adapters."""
        from .clients import build_clients  # local import keeps Django settings lazy

        return cls.from_clients(build_clients(), selector=selector)

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    @property
    def providers(self) -> tuple[ProviderId, ...]:
        """Provider ids this router can dispatch to."""
        return tuple(self._providers)

    def route(
        self,
        messages: Iterable[MessageLike],
        options: Optional[RequestOptions] = None,
    ) -> AIResponse:
        """Answer *messages* with the requested or selected provider.

        Args:
            messages: Ordered conversation; :class:`Message` objects or
                ``{"role": …, "content": …}`` dicts.
            options: Request options; ``options.provider`` bypasses the selector.

        Returns:
            The adapter's :class:`AIResponse`, unchanged.

        Raises:
            :class:`~aihub.services.base.UpstreamError`: When the provider call fails.
            :class:`~aihub.services.base.ServiceNotConfigured`: When the chosen
                provider has no adapter.
        """
        options = options or RequestOptions()
        messages = as_messages(messages)

        if options.provider is not None:
            provider_id = options.provider
        else:
            provider_id = self.selector.select(messages)
            logger.debug('Selector chose provider %s', provider_id)

        provider = self._providers.get(provider_id)
        if provider is None:
            raise ServiceNotConfigured(f'No adapter configured for AI provider "{provider_id}".')

        start = time.monotonic()
        try:
            response = provider.call(messages, options)
        except UpstreamError as exc:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.error(
                'AI request failed: provider=%s model=%s duration_ms=%d error=%s',
                exc.provider,
                exc.model,
                duration_ms,
                exc.cause,
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            'AI request completed: provider=%s model=%s duration_ms=%d tokens=%d/%d cost=%.6f',
            response.provider,
            response.model,
            duration_ms,
            response.tokens_used.input,
            response.tokens_used.output,
            response.cost,
        )
        return response

    def generate(self, prompt: str, options: Optional[RequestOptions] = None) -> AIResponse:
        """Shortcut for single-prompt generation.

        Wraps *prompt* in a ``user`` message and delegates to :meth:`route`.
        """
        return self.route([Message(Role.USER, prompt)], options)


@functools.lru_cache(maxsize=None)
def get_router() -> AIRouter:
    """Return the router built from settings, constructing it on first use.

    Raises:
        ServiceNotConfigured: if no provider API key is configured.
    """
    return AIRouter.from_settings()
