"""Heuristic provider selection from conversation content.

Selection is keyword matching on the latest non-empty message, not a
classifier with accuracy guarantees. Any object with a
``classify(text) -> ProviderId`` method can replace the keyword rules.
"""

import re
from typing import Iterable, Optional, Protocol

from .schemas import Message, ProviderId

DEFAULT_PROVIDER = ProviderId.REASONING

# Ordered rules, first match wins. Stems are matched as substrings.
KEYWORD_RULES: tuple[tuple[re.Pattern, ProviderId], ...] = (
    # medical / health / therapy
    (re.compile(r'medycyn|lekar|terapi|diagnoz|zdrow', re.IGNORECASE), ProviderId.SAFETY),
    # analysis / reasoning / maths / code
    (re.compile(r'analiz|rozumow|matemat|logik|kod', re.IGNORECASE), ProviderId.REASONING),
    # creative writing
    (re.compile(r'napisz|stw[oó]rz|wymyśl|kreatyw', re.IGNORECASE), ProviderId.GENERAL),
)


class Classifier(Protocol):
    def classify(self, text: str) -> ProviderId:
        ...


class KeywordClassifier:
    """Maps text to a provider with ordered regex rules."""

    def __init__(
        self,
        rules: Iterable[tuple[re.Pattern, ProviderId]] = KEYWORD_RULES,
        default: ProviderId = DEFAULT_PROVIDER,
    ) -> None:
        self.rules = tuple(rules)
        self.default = default

    def classify(self, text: str) -> ProviderId:
        for pattern, provider in self.rules:
            if pattern.search(text):
                return provider
        return self.default


def latest_content(messages: Iterable[Message]) -> str:
    """Return the content of the last message with non-empty content, or ``''``."""
    for msg in reversed(list(messages)):
        if msg.content:
            return msg.content
    return ''


class ProviderSelector:
    """Picks a provider when the caller did not request one explicitly."""

    def __init__(self, classifier: Optional[Classifier] = None) -> None:
        self.classifier = classifier or KeywordClassifier()

    def select(self, messages: Iterable[Message]) -> ProviderId:
        return self.classifier.classify(latest_content(messages))
