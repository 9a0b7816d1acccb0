"""
Per-request-class generation counters for stale-response suppression.

A token is issued when a request starts and checked when it resolves; only a
response whose token still matches the current generation of its class may
be applied. Issuing a new token supersedes every earlier one of that class.
"""

from collections import defaultdict


class RequestGenerations:
    """Monotonically increasing generation counter per request class."""

    def __init__(self):
        self._current: dict[str, int] = defaultdict(int)

    def issue(self, request_class: str) -> int:
        """Start a new generation and return its token."""
        self._current[request_class] += 1
        return self._current[request_class]

    def invalidate(self, request_class: str) -> None:
        """Supersede in-flight requests without starting a new one."""
        self._current[request_class] += 1

    def current(self, request_class: str) -> int:
        return self._current[request_class]

    def is_current(self, request_class: str, token: int) -> bool:
        return self._current[request_class] == token
