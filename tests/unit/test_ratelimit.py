from cfprovider.ratelimit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_disabled_limiter_never_waits():
    clock = FakeClock()
    limiter = RateLimiter(0, clock=clock, sleep=clock.sleep)

    for _ in range(50):
        limiter.acquire()

    assert not limiter.enabled
    assert clock.sleeps == []
    assert limiter.wait_time() == 0.0


def test_burst_up_to_rps_then_waits():
    clock = FakeClock()
    limiter = RateLimiter(4, clock=clock, sleep=clock.sleep)

    for _ in range(4):
        limiter.acquire()
    assert clock.sleeps == []
    assert limiter.wait_time() == 0.25

    limiter.acquire()
    assert clock.sleeps == [0.25]


def test_throughput_bounded_by_rps():
    clock = FakeClock()
    limiter = RateLimiter(2, clock=clock, sleep=clock.sleep)
    start = clock.now

    for _ in range(12):
        limiter.acquire()

    # 2 burst tokens, then 10 more at 2/s
    assert clock.now - start == 5.0


def test_refill_after_idle():
    clock = FakeClock()
    limiter = RateLimiter(1, clock=clock, sleep=clock.sleep)
    limiter.acquire()
    clock.now += 10

    limiter.acquire()

    assert clock.sleeps == []
