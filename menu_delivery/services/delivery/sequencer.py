"""
Last-request-wins sequencing for interactive callers.

A calculator re-triggered on every CEP edit can receive responses out of
order. Each logical slot (e.g. "sidebar", "checkout") keeps a counter; a
response is applied only if no newer request was started for its slot.
In-flight requests are not cancelled, their results are just dropped.
"""

from collections import defaultdict
from typing import Hashable


class RequestSequencer:
    """
    Generation counters per slot.

    Example:
        >>> seq = RequestSequencer()
        >>> first = seq.begin_request("checkout")
        >>> second = seq.begin_request("checkout")
        >>> seq.is_current("checkout", first)
        False
        >>> seq.is_current("checkout", second)
        True
    """

    def __init__(self):
        self._counters: dict[Hashable, int] = defaultdict(int)

    def begin_request(self, slot: Hashable) -> int:
        """Start a new computation for slot and return its token."""
        self._counters[slot] += 1
        return self._counters[slot]

    def is_current(self, slot: Hashable, token: int) -> bool:
        """True if token belongs to the most recently started request of slot."""
        return self._counters.get(slot, 0) == token

    def current(self, slot: Hashable) -> int:
        return self._counters.get(slot, 0)
