"""Cost calculation utilities for AI token usage.

Prices are per 1 million tokens and ship with the code; they are never
fetched at runtime. Models missing from :data:`TOKEN_COSTS` are billed with
their provider's default price pair, which is an approximation and not a
billing-grade figure.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from .schemas import ProviderId

logger = logging.getLogger(__name__)


class Price(NamedTuple):
    """Price per 1 million input / output tokens."""

    input: Decimal
    output: Decimal


def _price(input_per_1m: str, output_per_1m: str) -> Price:
    return Price(Decimal(input_per_1m), Decimal(output_per_1m))


TOKEN_COSTS: dict[str, Price] = {
    'claude-sonnet-4-20250514': _price('3', '15'),
    'claude-3-5-haiku-20241022': _price('0.25', '1.25'),
    'gpt-4o': _price('2.5', '10'),
    'gpt-4o-mini': _price('0.15', '0.6'),
    'deepseek-chat': _price('0.14', '0.28'),
    'deepseek-reasoner': _price('0.55', '2.19'),
    'gemini-1.5-pro': _price('1.25', '5'),
    'gemini-1.5-flash': _price('0.075', '0.3'),
}

DEFAULT_PRICES: dict[ProviderId, Price] = {
    ProviderId.SAFETY: _price('3', '15'),
    ProviderId.GENERAL: _price('2.5', '10'),
    ProviderId.REASONING: _price('0.14', '0.28'),
    ProviderId.MULTIMODAL: _price('1.25', '5'),
}

_ONE_MILLION = Decimal(1_000_000)


def get_price(provider: ProviderId, model_id: str) -> Price:
    """Return the price pair for *model_id*, falling back to *provider*'s default."""
    price = TOKEN_COSTS.get(model_id)
    if price is None:
        price = DEFAULT_PRICES[ProviderId(provider)]
        logger.warning(
            "No price configured for model '%s'; using %s default pricing (%s/%s per 1M tokens).",
            model_id,
            provider,
            price.input,
            price.output,
        )
    return price


def calculate_cost(input_tokens: int, output_tokens: int, price: Price) -> Decimal:
    """Return the cost of a request.

    Args:
        input_tokens: Number of tokens in the prompt.
        output_tokens: Number of tokens in the completion.
        price: Price pair per 1 million tokens.

    Returns:
        Decimal cost in the currency unit of the price table.
    """
    return (
        Decimal(input_tokens) * price.input
        + Decimal(output_tokens) * price.output
    ) / _ONE_MILLION
