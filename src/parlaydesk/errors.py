"""Exception types shared across ParlayDesk."""

from __future__ import annotations


class ParlayDeskError(Exception):
    """Base class for application errors."""


class ValidationError(ParlayDeskError, ValueError):
    """Structurally invalid input: leg counts, prices, stakes."""


class NotFoundError(ParlayDeskError):
    """The referenced record does not exist for the requesting user."""


class ConflictError(ParlayDeskError):
    """The request collides with an existing record."""


class GatewayUnavailable(ParlayDeskError):
    """An upstream provider is unconfigured, erroring or throttled."""


class RateLimitError(GatewayUnavailable):
    """Provider rejected the request due to quota or rate limits."""

    code = "RATE_LIMIT"

    def __init__(self, message: str = "API rate limit exceeded", retry_after: int = 60) -> None:
        super().__init__(message)
        self.retry_after = retry_after
