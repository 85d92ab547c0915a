"""
HTTP throughput prober.

Performs a time-boxed streaming download while the process resolver
is pinned to one candidate, and reports the effective bitrate.
"""

import logging
import time
from typing import Callable, Optional

import httpx

from .config import ProbeSettings
from .errors import DownloadError, InvalidResolverError
from .pinning import SYSTEM_PIN, ResolverPin

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302)


def compute_speed_mbps(received_bytes: int, elapsed_seconds: float) -> float:
    """Bitrate in megabits per second."""
    if elapsed_seconds <= 0:
        raise DownloadError("No measurable elapsed time")
    return received_bytes * 8 / (1_000_000 * elapsed_seconds)


class ThroughputProber:
    """
    Measures download speed through a given resolver.

    Once the time budget is spent the transfer is aborted and the rate is
    taken from the bytes received so far. A body that completes earlier is
    measured over its actual transfer time.
    """

    def __init__(
        self,
        settings: Optional[ProbeSettings] = None,
        pin: Optional[ResolverPin] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the prober.

        Args:
            settings: Probe tunables (timeouts, redirect limit)
            pin: Resolver pin to hold during the download
            transport: Optional httpx transport (mainly for tests)
            clock: Monotonic clock in seconds
        """
        self.settings = settings or ProbeSettings()
        self.pin = pin or SYSTEM_PIN
        self.transport = transport
        self.clock = clock

    def _create_client(self, max_duration_ms: float) -> httpx.AsyncClient:
        timeout = httpx.Timeout(
            self.settings.idle_timeout(max_duration_ms),
            connect=self.settings.connect_timeout,
        )
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=False,
            transport=self.transport,
        )

    async def probe(self, url: str, resolver: str, max_duration_ms: float) -> float:
        """
        Download from ``url`` with resolution pinned to ``resolver``.

        Args:
            url: Download target
            resolver: Resolver address to pin
            max_duration_ms: Time budget before the transfer is aborted

        Returns:
            Speed in Mbps

        Raises:
            DownloadError: On HTTP errors, bad redirects, timeouts,
                network failures or an unreadable body
        """
        try:
            with self.pin.pinned(
                resolver,
                timeout=self.settings.lookup_timeout,
                system=True,
            ):
                return await self._download(url, max_duration_ms)
        except InvalidResolverError as e:
            raise DownloadError(str(e)) from e
        except httpx.TimeoutException as e:
            raise DownloadError("Download test timed out") from e
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as e:
            raise DownloadError(f"Download failed: {e}") from e

    async def _download(self, url: str, max_duration_ms: float) -> float:
        start = self.clock()
        received = 0
        target = httpx.URL(url)

        async with self._create_client(max_duration_ms) as client:
            for _ in range(self.settings.max_redirects + 1):
                async with client.stream("GET", target) as response:
                    status = response.status_code

                    if status in REDIRECT_STATUSES:
                        location = response.headers.get("location")
                        if not location:
                            raise DownloadError(
                                "Redirect location not provided", status_code=status
                            )
                        target = response.url.join(location)
                        logger.debug("Following %d redirect to %s", status, target)
                        continue

                    if status != 200:
                        raise DownloadError(
                            f"HTTP error! status: {status}", status_code=status
                        )

                    async for chunk in response.aiter_raw():
                        received += len(chunk)
                        elapsed = self.clock() - start
                        if elapsed * 1000 >= max_duration_ms:
                            # Leaving the stream context aborts the transfer
                            return compute_speed_mbps(received, elapsed)

                    return compute_speed_mbps(received, self.clock() - start)

        raise DownloadError(
            f"Too many redirects (limit {self.settings.max_redirects})"
        )
