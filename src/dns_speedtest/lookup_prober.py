"""
DNS latency prober.

Issues repeated A-record lookups for one domain against one resolver
and records the round-trip time of each successful attempt with
nanosecond-precision timing.
"""

import logging
import time
from typing import Callable, Optional, Sequence

import dns.exception
import dns.rdatatype

from .config import ProbeSettings
from .errors import InvalidResolverError
from .models import LookupOutcome
from .pinning import SYSTEM_PIN, ResolverPin

logger = logging.getLogger(__name__)


def count_spikes(latencies: Sequence[float], threshold_ms: float = 50.0) -> int:
    """
    Count samples exceeding their predecessor by more than ``threshold_ms``.

    Failed attempts never appear in ``latencies``, so the predecessor is
    the previous successful sample rather than the previous attempt.
    """
    return sum(
        1 for prev, cur in zip(latencies, latencies[1:])
        if cur > prev + threshold_ms
    )


class LookupProber:
    """
    Measures lookup latency for a (resolver, domain) pair.

    Attempts run strictly in order; spike detection depends on it.
    """

    def __init__(
        self,
        settings: Optional[ProbeSettings] = None,
        pin: Optional[ResolverPin] = None,
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        """
        Initialize the prober.

        Args:
            settings: Probe tunables (timeout, spike threshold)
            pin: Resolver pin to hold while probing
            clock: Nanosecond clock used for timing
        """
        self.settings = settings or ProbeSettings()
        self.pin = pin or SYSTEM_PIN
        self.clock = clock

    async def probe(self, resolver: str, domain: str, attempts: int) -> LookupOutcome:
        """
        Run ``attempts`` lookups of ``domain`` against ``resolver``.

        Lookup failures are counted as packet loss and never raised.

        Args:
            resolver: Resolver address
            domain: Hostname to resolve
            attempts: Number of lookups, at least 1

        Returns:
            LookupOutcome with successful latencies in attempt order
        """
        if attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {attempts}")
        if not resolver or not domain:
            raise ValueError("resolver and domain must be non-empty")

        try:
            with self.pin.pinned(resolver, timeout=self.settings.lookup_timeout) as handle:
                return await self._run_attempts(handle, domain, attempts)
        except InvalidResolverError as e:
            logger.warning("%s; counting all %d attempts as lost", e, attempts)
            return LookupOutcome(packet_loss=attempts)

    async def _run_attempts(self, handle, domain: str, attempts: int) -> LookupOutcome:
        outcome = LookupOutcome()
        threshold = self.settings.spike_threshold_ms

        for _ in range(attempts):
            latency = await self._lookup(handle, domain)
            if latency is None:
                outcome.packet_loss += 1
                continue

            if outcome.latencies and latency > outcome.latencies[-1] + threshold:
                outcome.ping_spikes += 1
            outcome.latencies.append(latency)

        return outcome

    async def _lookup(self, handle, domain: str) -> Optional[float]:
        """Time one lookup in milliseconds, or None if it failed."""
        start = self.clock()
        try:
            await handle.resolve(domain, dns.rdatatype.A)
        except (dns.exception.DNSException, OSError) as e:
            logger.debug("Lookup of %s failed: %s", domain, e)
            return None
        return (self.clock() - start) / 1_000_000
