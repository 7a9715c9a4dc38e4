"""
SDK client factory for the four upstream providers.

Configuration is read from Django settings, which load it from environment
variables:

    AI_PROVIDER_KEYS    – {provider id: API key}
                          (ANTHROPIC_API_KEY, OPENAI_API_KEY,
                           DEEPSEEK_API_KEY, GOOGLE_AI_API_KEY)
    DEEPSEEK_BASE_URL   – OpenAI-compatible DeepSeek endpoint
    AI_REQUEST_TIMEOUT  – transport timeout in seconds

Clients are built once at startup and shared by reference; none of them is
mutated after construction. No network I/O is performed here.
"""

import logging
from typing import Any, Callable, Optional

from django.conf import settings

from aihub.services.base import ServiceNotConfigured

from .schemas import ProviderId

logger = logging.getLogger(__name__)

API_KEY_ENV = {
    ProviderId.SAFETY: 'ANTHROPIC_API_KEY',
    ProviderId.GENERAL: 'OPENAI_API_KEY',
    ProviderId.REASONING: 'DEEPSEEK_API_KEY',
    ProviderId.MULTIMODAL: 'GOOGLE_AI_API_KEY',
}


def _load_config() -> dict:
    """Read and validate AI client configuration from Django settings."""
    keys = getattr(settings, 'AI_PROVIDER_KEYS', {}) or {}
    timeout_raw = getattr(settings, 'AI_REQUEST_TIMEOUT', 60)
    try:
        timeout = float(timeout_raw)
    except (TypeError, ValueError):
        raise ServiceNotConfigured(
            f'AI_REQUEST_TIMEOUT must be a number, got: {timeout_raw!r}'
        )

    return {
        'keys': {ProviderId(name): (value or '').strip() for name, value in keys.items()},
        'deepseek_base_url': getattr(settings, 'DEEPSEEK_BASE_URL', 'https://api.deepseek.com/v1'),
        'timeout': timeout,
    }


def _anthropic_client(api_key: str, cfg: dict) -> Any:
    try:
        import anthropic  # noqa: PLC0415
    except ImportError as exc:
        raise ImportError(
            'anthropic package is required for the safety provider. '
            'Install it with: pip install anthropic'
        ) from exc
    return anthropic.Anthropic(api_key=api_key, timeout=cfg['timeout'], max_retries=0)


def _openai_client(api_key: str, cfg: dict, base_url: Optional[str] = None) -> Any:
    try:
        import openai  # noqa: PLC0415
    except ImportError as exc:
        raise ImportError(
            'openai package is required for the general and reasoning providers. '
            'Install it with: pip install openai'
        ) from exc
    client_kwargs: dict[str, Any] = {
        'api_key': api_key,
        'timeout': cfg['timeout'],
        'max_retries': 0,
    }
    if base_url:
        client_kwargs['base_url'] = base_url
    return openai.OpenAI(**client_kwargs)


def _deepseek_client(api_key: str, cfg: dict) -> Any:
    return _openai_client(api_key, cfg, base_url=cfg['deepseek_base_url'])


def _gemini_client(api_key: str, cfg: dict) -> Any:
    try:
        from google import genai  # noqa: PLC0415
    except ImportError as exc:
        raise ImportError(
            'google-genai package is required for the multimodal provider. '
            'Install it with: pip install google-genai'
        ) from exc
    # google-genai expects the timeout in milliseconds
    return genai.Client(api_key=api_key, http_options={'timeout': int(cfg['timeout'] * 1000)})


_FACTORIES: dict[ProviderId, Callable[[str, dict], Any]] = {
    ProviderId.SAFETY: _anthropic_client,
    ProviderId.GENERAL: _openai_client,
    ProviderId.REASONING: _deepseek_client,
    ProviderId.MULTIMODAL: _gemini_client,
}


def build_clients() -> dict[ProviderId, Any]:
    """
    Create one SDK client per provider that has an API key configured.

    Providers without a key are skipped with a warning.

    Raises:
        ServiceNotConfigured: if no provider has an API key, or settings are invalid.
    """
    cfg = _load_config()

    clients: dict[ProviderId, Any] = {}
    for provider, factory in _FACTORIES.items():
        api_key = cfg['keys'].get(provider, '')
        if not api_key:
            logger.warning(
                'AI provider %s disabled: %s is not set', provider, API_KEY_ENV[provider]
            )
            continue
        clients[provider] = factory(api_key, cfg)
        logger.debug('Built %s client for provider %s', type(clients[provider]).__name__, provider)

    if not clients:
        raise ServiceNotConfigured(
            'No AI provider configured. Set at least one of: '
            + ', '.join(API_KEY_ENV.values())
        )
    return clients
