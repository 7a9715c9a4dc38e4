"""Named model tiers per provider."""

from .schemas import TIERS, ProviderId

AI_MODELS: dict[ProviderId, dict[str, str]] = {
    ProviderId.SAFETY: {
        'default': 'claude-sonnet-4-20250514',
        'fast': 'claude-3-5-haiku-20241022',
        'powerful': 'claude-sonnet-4-20250514',
    },
    ProviderId.GENERAL: {
        'default': 'gpt-4o',
        'fast': 'gpt-4o-mini',
        'powerful': 'gpt-4o',
    },
    ProviderId.REASONING: {
        'default': 'deepseek-chat',
        'fast': 'deepseek-chat',
        'powerful': 'deepseek-reasoner',
    },
    ProviderId.MULTIMODAL: {
        'default': 'gemini-1.5-pro',
        'fast': 'gemini-1.5-flash',
        'powerful': 'gemini-1.5-pro',
    },
}


def model_for(provider: ProviderId, tier: str = 'default') -> str:
    """Return the concrete model id for *provider* at *tier*.

    Raises:
        ValueError: If *tier* is not one of :data:`TIERS`.
    """
    if tier not in TIERS:
        raise ValueError(f"Unknown model tier {tier!r}; expected one of {', '.join(TIERS)}")
    return AI_MODELS[ProviderId(provider)][tier]
