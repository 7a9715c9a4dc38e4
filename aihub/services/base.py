"""Base exceptions for aihub services."""


class ServiceError(Exception):
    """Base class for all service-layer errors."""


class ServiceNotConfigured(ServiceError):
    """Raised when a required service has no active configuration."""


class UpstreamError(ServiceError):
    """Raised when an upstream AI provider call fails.

    Wraps transport failures, non-success statuses and malformed replies.
    The original exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, provider: str, model: str, cause: BaseException) -> None:
        self.provider = provider
        self.model = model
        self.cause = cause
        super().__init__(f'{provider} request failed (model={model}): {cause}')
