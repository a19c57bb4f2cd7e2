"""
Rate Limiter port interface.

Spaces out calls to the game backend. The clock is injected so tests
can run a full scan on virtual time.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Time source used by rate limiters."""

    def now(self) -> float:
        """Current time in seconds (monotonic)."""
        ...

    async def sleep(self, seconds: float) -> None:
        """Suspend the caller for the given number of seconds."""
        ...


class RateLimiter(ABC):
    """
    Abstract throttle for outgoing requests.

    acquire() returns once the caller may issue its next request.
    Callers await it before every fetch and call release() once the
    request has been handled; since the scan issues one fetch at a
    time, ordering is preserved.
    """

    @abstractmethod
    async def acquire(self) -> None:
        """Wait until the next request may be issued."""
        ...

    def release(self) -> None:
        """Mark the current request as handled. No-op by default."""
        return None
