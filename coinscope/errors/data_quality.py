"""
Input and payload error classifications.

These exceptions are raised before or right after a network round trip when
the request cannot be issued or the response cannot be mapped.
"""

from typing import Any, Optional


class DataQualityError(Exception):
    """Base class for bad inputs and bad payloads."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingInputError(DataQualityError):
    """A required input is empty, e.g. an asset id for a chart request."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class InvalidInputError(DataQualityError):
    """An input is present but outside the accepted values."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class MalformedPayloadError(DataQualityError):
    """Provider response could not be decoded or has an unexpected shape."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
