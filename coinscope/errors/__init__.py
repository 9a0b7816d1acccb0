"""
Error classification system for the dashboard engine.

Fetch-layer errors propagate to the caller; computation-layer conditions are
never raised and are described by ComputationDegenerate instead.
"""

from .data_quality import (
    DataQualityError,
    InvalidInputError,
    MalformedPayloadError,
    MissingInputError,
)
from .degenerate import ComputationDegenerate
from .network import (
    NetworkFailureError,
    RateLimitedError,
    UnauthorizedError,
)
from .system_failures import (
    ConfigurationError,
    PersistenceError,
    SystemFailureError,
)

__all__ = [
    # Network
    "NetworkFailureError",
    "RateLimitedError",
    "UnauthorizedError",
    # Data Quality
    "DataQualityError",
    "MissingInputError",
    "InvalidInputError",
    "MalformedPayloadError",
    # System Failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
    # Guarded computations
    "ComputationDegenerate",
]
