import pytest

from neatsuite.infrastructure.resilience.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_requests=3, window_ms=1000, clock=clock)


def test_allows_requests_until_limit(limiter):
    for _ in range(3):
        assert limiter.can_make_request()
        limiter.record_request()

    assert not limiter.can_make_request()
    assert limiter.get_remaining_requests() == 0


def test_remaining_requests_counts_down(limiter):
    assert limiter.get_remaining_requests() == 3
    limiter.record_request()
    assert limiter.get_remaining_requests() == 2


def test_window_slides(limiter, clock):
    for _ in range(3):
        limiter.record_request()

    clock.advance(1.0)

    assert limiter.can_make_request()
    assert limiter.get_remaining_requests() == 3
    assert len(limiter.timestamps) == 0


def test_time_until_next_request(limiter, clock):
    assert limiter.get_time_until_next_request() == 0

    for _ in range(3):
        limiter.record_request()
    clock.advance(0.25)

    assert limiter.get_time_until_next_request() == pytest.approx(750)


def test_only_expired_timestamps_are_pruned(limiter, clock):
    limiter.record_request()
    clock.advance(0.5)
    limiter.record_request()
    limiter.record_request()
    clock.advance(0.5)

    # The first request left the window, the other two have not
    assert limiter.get_remaining_requests() == 1
    assert limiter.get_time_until_next_request() == 0
