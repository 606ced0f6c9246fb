# tests/test_rate_limiter.py
"""
Testes do rate limiter em janela fixa
"""
import pytest

from conexao.constants import MODERATION_RATE_LIMIT, REPORT_RATE_LIMIT
from conexao.services.rate_limiter import NullRateLimiter, RateLimiter, WindowRateLimiter


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock(100.0)


@pytest.fixture
def limiter(clock):
    return WindowRateLimiter({'report': (3, 60)}, clock=clock)


class TestWindowRateLimiter:

    def test_allows_up_to_limit(self, limiter):
        results = [limiter.hit(1, 'report') for _ in range(3)]
        assert results == [(True, 0.0)] * 3

    def test_blocks_after_limit(self, limiter, clock):
        for _ in range(3):
            limiter.hit(1, 'report')
        clock.now += 20
        allowed, retry_after = limiter.hit(1, 'report')
        assert allowed is False
        assert retry_after == pytest.approx(40)

    def test_window_resets(self, limiter, clock):
        for _ in range(4):
            limiter.hit(1, 'report')
        clock.now += 60
        assert limiter.hit(1, 'report') == (True, 0.0)

    def test_separate_actors(self, limiter):
        for _ in range(3):
            limiter.hit(1, 'report')
        assert limiter.hit(2, 'report')[0] is True

    def test_unlimited_action(self, limiter):
        for _ in range(50):
            assert limiter.hit(1, 'moderation') == (True, 0.0)

    def test_instances_do_not_share_state(self, clock):
        first = WindowRateLimiter({'report': (1, 60)}, clock=clock)
        second = WindowRateLimiter({'report': (1, 60)}, clock=clock)
        first.hit(1, 'report')
        assert first.hit(1, 'report')[0] is False
        assert second.hit(1, 'report')[0] is True

    def test_default_limits(self, clock):
        limiter = WindowRateLimiter({'report': REPORT_RATE_LIMIT, 'moderation': MODERATION_RATE_LIMIT},
                                    clock=clock)
        for _ in range(REPORT_RATE_LIMIT[0]):
            assert limiter.hit(1, 'report')[0] is True
        assert limiter.hit(1, 'report')[0] is False


class TestNullRateLimiter:

    def test_never_limits(self):
        limiter = NullRateLimiter()
        assert all(limiter.hit(1, 'report') == (True, 0.0) for _ in range(100))

    def test_base_is_abstract(self):
        with pytest.raises(NotImplementedError):
            RateLimiter().hit(1, 'report')
