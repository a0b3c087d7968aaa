"""
Minimum-interval gate for AI-draft requests.
"""
import time


class RateLimiter:
    """Allows one acquisition per ``min_interval`` seconds."""

    def __init__(self, min_interval: float, clock=time.monotonic):
        self.min_interval = min_interval
        self.clock = clock
        self.last_acquired = None

    def try_acquire(self, now: float = None) -> bool:
        """Record ``now`` and return True, or return False if called too soon."""
        if now is None:
            now = self.clock()
        if self.last_acquired is not None and now - self.last_acquired < self.min_interval:
            return False
        self.last_acquired = now
        return True

    def seconds_remaining(self, now: float = None) -> float:
        if self.last_acquired is None:
            return 0.0
        if now is None:
            now = self.clock()
        return max(0.0, self.min_interval - (now - self.last_acquired))
