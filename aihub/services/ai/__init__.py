"""
AI routing service package.

Exports the public API surface; no network I/O or client construction on import.
"""

from .router import AIRouter
from .schemas import AIResponse, Message, ProviderId, RequestOptions, Role, TokenUsage
from .selector import KeywordClassifier, ProviderSelector

__all__ = [
    "AIResponse",
    "AIRouter",
    "KeywordClassifier",
    "Message",
    "ProviderId",
    "ProviderSelector",
    "RequestOptions",
    "Role",
    "TokenUsage",
]
