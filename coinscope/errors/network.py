"""
Network error classifications for the market-data boundary.

These exceptions carry a user-facing message so the view layer can render
a persistent inline error without knowing about HTTP details.
"""

from typing import Any, Optional


class NetworkFailureError(Exception):
    """Any non-success status or transport error from the data provider."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 url: Optional[str] = None, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.context = context or {}
        self.recoverable = True

    @property
    def user_message(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return f"Network error: {self.args[0]}"


class RateLimitedError(NetworkFailureError):
    """Provider rejected the request with HTTP 429."""

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    @property
    def user_message(self) -> str:
        if self.retry_after:
            return f"Rate limit (429). Try again in ~{int(round(self.retry_after))} seconds."
        return "Rate limit (429). Try again in ~30-60 seconds."


class UnauthorizedError(NetworkFailureError):
    """Provider blocked the request with HTTP 401."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)

    @property
    def user_message(self) -> str:
        return "Unauthorized (401). The data provider blocked the request."
