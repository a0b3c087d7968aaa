"""
Test: Rate limiter: minimum interval between AI-draft calls.
"""
from backend.rate_limiter import RateLimiter


class TestTryAcquire:
    def test_first_call_is_allowed(self):
        assert RateLimiter(4.0).try_acquire(100.0)

    def test_too_soon(self):
        limiter = RateLimiter(4.0)
        assert (limiter.try_acquire(100.0), limiter.try_acquire(103.9)) == (True, False)

    def test_exactly_min_interval(self):
        limiter = RateLimiter(4.0)
        assert (limiter.try_acquire(100.0), limiter.try_acquire(104.0)) == (True, True)

    def test_rejection_leaves_state_unchanged(self):
        limiter = RateLimiter(4.0)
        limiter.try_acquire(100.0)
        assert not limiter.try_acquire(102.0)
        assert limiter.last_acquired == 100.0
        # measured from the accepted call, not the rejected one
        assert limiter.try_acquire(104.5)

    def test_uses_clock_by_default(self):
        now = [50.0]
        limiter = RateLimiter(4.0, clock=lambda: now[0])
        assert limiter.try_acquire()
        now[0] = 52.0
        assert not limiter.try_acquire()
        assert limiter.seconds_remaining() == 2.0
        now[0] = 54.0
        assert limiter.try_acquire()

    def test_seconds_remaining_before_first_call(self):
        assert RateLimiter(4.0).seconds_remaining(10.0) == 0.0
