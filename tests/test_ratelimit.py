import pytest

from jobseeker.ratelimit import RateGate


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_first_pass_never_sleeps():
    clock = FakeClock()
    gate = RateGate(0.5, clock=clock, sleep=clock.sleep)
    assert gate.wait() == 0.0
    assert clock.sleeps == []


def test_spaces_consecutive_passes():
    clock = FakeClock()
    gate = RateGate(0.5, clock=clock, sleep=clock.sleep)
    gate.wait()
    clock.now += 0.2
    assert gate.wait() == pytest.approx(0.3)
    assert gate.wait() == pytest.approx(0.5)
    assert clock.sleeps == [pytest.approx(0.3), pytest.approx(0.5)]


def test_no_sleep_after_interval_elapsed():
    clock = FakeClock()
    gate = RateGate(0.3, clock=clock, sleep=clock.sleep)
    gate.wait()
    clock.now += 1.0
    assert gate.wait() == 0.0


def test_reset():
    clock = FakeClock()
    gate = RateGate(0.5, clock=clock, sleep=clock.sleep)
    gate.wait()
    gate.reset()
    assert gate.wait() == 0.0


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        RateGate(-1)
