"""
Benchmark runner.

Orchestrates a run across the {resolver x domain} matrix:
- Latency trials for every domain, per resolver
- One throughput trial per resolver (optional)
- Ordered progress events, ending in a single terminal event

Trials run strictly one after another; they share the process
resolver configuration through a ResolverPin.
"""

import logging
from typing import AsyncIterator, Optional

from .config import ProbeSettings
from .errors import DownloadError, RunError
from .lookup_prober import LookupProber
from .models import (
    ErrorEvent,
    ProgressEvent,
    ResolverResult,
    ResultsEvent,
    RunEvent,
    RunRequest,
)
from .pinning import SYSTEM_PIN, ResolverPin
from .throughput_prober import ThroughputProber

logger = logging.getLogger(__name__)


def percent_complete(current: int, total: int) -> int:
    """Whole-number completion percentage, rounded half up and clamped."""
    if total <= 0:
        return 0
    return max(0, min(100, int(current * 100 / total + 0.5)))


class BenchmarkRunner:
    """
    Runs latency and throughput trials and streams progress.

    Each call to run() yields a fresh, finite event sequence that cannot
    be restarted.
    """

    def __init__(
        self,
        settings: Optional[ProbeSettings] = None,
        pin: Optional[ResolverPin] = None,
        lookup_prober: Optional[LookupProber] = None,
        throughput_prober: Optional[ThroughputProber] = None,
    ):
        """
        Initialize the runner.

        Args:
            settings: Probe tunables passed to default probers
            pin: Resolver pin shared by both probers
            lookup_prober: Override the latency prober
            throughput_prober: Override the throughput prober
        """
        self.settings = settings or ProbeSettings()
        pin = pin or SYSTEM_PIN
        self.lookup_prober = lookup_prober or LookupProber(self.settings, pin)
        self.throughput_prober = throughput_prober or ThroughputProber(
            self.settings, pin
        )

    def run(self, request: RunRequest) -> AsyncIterator[RunEvent]:
        """
        Validate ``request`` and return its event stream.

        Validation happens immediately, before any probing, so a rejected
        request never produces a stream.

        Raises:
            ValidationError: If the request is incomplete
        """
        request.validate()
        return self._run(request)

    async def _run(self, request: RunRequest) -> AsyncIterator[RunEvent]:
        results: list[ResolverResult] = []
        total = request.total_steps
        current = 0
        servers = len(request.resolvers)

        try:
            for i, server in enumerate(request.resolvers):
                logger.info("Testing DNS server %d/%d: %s", i + 1, servers, server)
                yield ProgressEvent(f"Testing DNS server {i + 1}/{servers}: {server}")

                dns_results: dict[str, tuple[float, ...]] = {}
                ping_spikes = 0
                packet_loss = 0
                download_speed: Optional[float] = None

                for j, domain in enumerate(request.domains):
                    yield ProgressEvent(
                        f"Testing domain {j + 1}/{len(request.domains)}: {domain}"
                    )

                    outcome = await self.lookup_prober.probe(
                        server, domain, request.test_count
                    )
                    dns_results[domain] = tuple(outcome.latencies)
                    ping_spikes += outcome.ping_spikes
                    packet_loss += outcome.packet_loss
                    current += request.test_count

                    yield ProgressEvent(
                        f"DNS tests completed for {domain}",
                        percent_complete(current, total),
                    )

                if request.throughput_enabled:
                    yield ProgressEvent(f"Starting download speed test for {server}")
                    try:
                        download_speed = await self.throughput_prober.probe(
                            request.download_url,
                            server,
                            request.download_budget_ms,
                        )
                    except DownloadError as e:
                        logger.warning("Download speed test error for %s: %s", server, e)
                        yield ProgressEvent(
                            f"Download speed test failed for {server}",
                            percent_complete(current, total),
                        )
                    else:
                        current += 1
                        logger.info("Download speed for %s: %.2f Mbps", server, download_speed)
                        yield ProgressEvent(
                            f"Download speed test completed for {server}",
                            percent_complete(current, total),
                        )

                results.append(ResolverResult(
                    dns_server=server,
                    dns_results=dns_results,
                    download_speed=download_speed,
                    ping_spikes=ping_spikes,
                    packet_loss=packet_loss,
                ))
        except Exception as e:
            logger.exception("Test execution failed")
            yield ErrorEvent(f"Test execution failed: {e}")
            return

        yield ResultsEvent(tuple(results))

    async def collect(self, request: RunRequest) -> tuple[ResolverResult, ...]:
        """
        Run to completion and return the results, ignoring progress.

        Raises:
            ValidationError: If the request is incomplete
            RunError: If the run ended with an error event
        """
        async for event in self.run(request):
            if isinstance(event, ResultsEvent):
                return event.results
            if isinstance(event, ErrorEvent):
                raise RunError(event.message)
        raise RunError("Run ended without a terminal event")
