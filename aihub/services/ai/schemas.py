"""Request / response dataclasses for the AI routing service."""

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7
TIERS = ('default', 'fast', 'powerful')


class ProviderId(str, enum.Enum):
    """The four interchangeable upstream providers."""

    SAFETY = 'safety'
    GENERAL = 'general'
    REASONING = 'reasoning'
    MULTIMODAL = 'multimodal'

    def __str__(self) -> str:
        return self.value


class Role(str, enum.Enum):
    USER = 'user'
    ASSISTANT = 'assistant'
    SYSTEM = 'system'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Message:
    """A single conversation turn."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        # Role('user') validates plain strings; unknown roles raise ValueError.
        object.__setattr__(self, 'role', Role(self.role))
        content = self.content or ''
        if not isinstance(content, str):
            raise TypeError(f'Message content must be text, got: {type(content).__name__}')
        object.__setattr__(self, 'content', content)

    @classmethod
    def from_dict(cls, data: dict) -> 'Message':
        """Build a message from an OpenAI-style ``{"role": ..., "content": ...}`` dict."""
        return cls(role=data.get('role', ''), content=data.get('content') or '')

    def to_dict(self) -> dict:
        return {'role': self.role.value, 'content': self.content}


@dataclass(frozen=True)
class RequestOptions:
    """Per-request options. Every field is optional and falls back to a default.

    Attributes:
        provider: Explicit provider; bypasses the selector when set.
        model: Explicit provider-side model id.
        tier: Tier used to pick the model when *model* is not given.
        max_tokens: Maximum completion tokens.
        temperature: Sampling temperature in ``[0, 2]``.
        system_prompt: Extra system content placed before any system messages.
        stream: Accepted for API compatibility; responses are always complete.
    """

    provider: Optional[ProviderId] = None
    model: Optional[str] = None
    tier: str = 'default'
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    system_prompt: Optional[str] = None
    stream: bool = False

    def __post_init__(self) -> None:
        if self.provider is not None:
            object.__setattr__(self, 'provider', ProviderId(self.provider))
        if self.tier not in TIERS:
            raise ValueError(f"Unknown model tier {self.tier!r}; expected one of {', '.join(TIERS)}")
        if self.max_tokens is None:
            object.__setattr__(self, 'max_tokens', DEFAULT_MAX_TOKENS)
        if self.temperature is None:
            object.__setattr__(self, 'temperature', DEFAULT_TEMPERATURE)
        if not isinstance(self.max_tokens, int) or isinstance(self.max_tokens, bool) or self.max_tokens <= 0:
            raise ValueError(f'max_tokens must be a positive integer, got: {self.max_tokens!r}')
        if not isinstance(self.temperature, (int, float)) or not 0 <= self.temperature <= 2:
            raise ValueError(f'temperature must be within [0, 2], got: {self.temperature!r}')
        for name in ('model', 'system_prompt'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f'{name} must be text, got: {type(value).__name__}')
        if not isinstance(self.stream, bool):
            raise ValueError(f'stream must be a boolean, got: {self.stream!r}')

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'RequestOptions':
        """Build options from a camelCase or snake_case dict (e.g. a JSON body)."""
        data = data or {}
        kwargs: dict[str, Any] = {}
        for key, aliases in (
            ('provider', ('provider',)),
            ('model', ('model',)),
            ('tier', ('tier',)),
            ('max_tokens', ('max_tokens', 'maxTokens')),
            ('temperature', ('temperature',)),
            ('system_prompt', ('system_prompt', 'systemPrompt')),
            ('stream', ('stream',)),
        ):
            for alias in aliases:
                if data.get(alias) is not None:
                    kwargs[key] = data[alias]
                    break
        return cls(**kwargs)


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported by the upstream for one call."""

    input: int = 0
    output: int = 0

    @property
    def total(self) -> int:
        return self.input + self.output

    def to_dict(self) -> dict:
        return {'input': self.input, 'output': self.output, 'total': self.total}


@dataclass
class ProviderResponse:
    """Raw reply extracted from a provider SDK call."""

    text: str
    raw: Any
    input_tokens: Optional[int]
    output_tokens: Optional[int]


@dataclass
class AIResponse:
    """Structured response returned to callers of AIRouter."""

    content: str
    provider: ProviderId
    model: str
    tokens_used: TokenUsage = field(default_factory=TokenUsage)
    cost: float = 0.0

    def to_dict(self) -> dict:
        return {
            'content': self.content,
            'provider': self.provider.value,
            'model': self.model,
            'tokensUsed': self.tokens_used.to_dict(),
            'cost': self.cost,
        }
