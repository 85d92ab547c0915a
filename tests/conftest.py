import pytest

from dns_speedtest.errors import DownloadError
from dns_speedtest.models import LookupOutcome
from dns_speedtest.pinning import ResolverPin
from dns_speedtest.runner import BenchmarkRunner


class FakeClock:
    """Manually advanced clock; returns nanoseconds or seconds."""

    def __init__(self, unit: float = 1_000_000):
        self.now = 0
        self.unit = unit  # clock ticks per millisecond

    def __call__(self):
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += int(ms * self.unit)


class SecondsClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedResolver:
    """
    Async resolver double.

    Each script entry is either a latency in milliseconds (the clock is
    advanced and the lookup succeeds) or an exception to raise.
    """

    def __init__(self, script, clock: FakeClock):
        self.script = list(script)
        self.clock = clock
        self.queries = []

    async def resolve(self, domain, rdtype):
        self.queries.append((domain, rdtype))
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        self.clock.advance_ms(step)
        return ["93.184.216.34"]


class FakeLookupProber:
    def __init__(self, outcomes=None, latency: float = 10.0):
        self.outcomes = outcomes or {}
        self.latency = latency
        self.calls = []

    async def probe(self, resolver, domain, attempts):
        self.calls.append((resolver, domain, attempts))
        outcome = self.outcomes.get((resolver, domain))
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return LookupOutcome(latencies=[self.latency] * attempts)
        return LookupOutcome(
            latencies=list(outcome.latencies),
            ping_spikes=outcome.ping_spikes,
            packet_loss=outcome.packet_loss,
        )


class FakeThroughputProber:
    def __init__(self, speeds=None, default: float = 50.0):
        self.speeds = speeds or {}
        self.default = default
        self.calls = []

    async def probe(self, url, resolver, max_duration_ms):
        self.calls.append((url, resolver, max_duration_ms))
        value = self.speeds.get(resolver, self.default)
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def seconds_clock():
    return SecondsClock()


@pytest.fixture
def scripted_pin(clock):
    """Build a pin whose scoped resolver plays back a script."""
    def make(script):
        double = ScriptedResolver(script, clock)
        pin = ResolverPin(resolver_factory=lambda address, timeout: double)
        return pin, double
    return make


@pytest.fixture
def make_runner():
    """Build a runner around fake probers."""
    def make(outcomes=None, speeds=None, latency: float = 10.0, speed: float = 50.0):
        return BenchmarkRunner(
            lookup_prober=FakeLookupProber(outcomes, latency),
            throughput_prober=FakeThroughputProber(speeds, speed),
        )
    return make


@pytest.fixture
def download_failure():
    return DownloadError("HTTP error! status: 404", status_code=404)
