"""
Statistical summaries of resolver results.

Calculates per-resolver statistics for display and export:
- Basic stats: min, max, average, median
- Percentiles: p95
- Reliability: jitter, standard deviation, packet loss
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .models import ResolverResult
from .scoring import packet_loss_pct


@dataclass
class ResolverSummary:
    """Aggregated statistics for one resolver."""
    dns_server: str
    successful: int
    failed: int
    ping_spikes: int
    download_speed: Optional[float]

    # Latency stats in milliseconds, None without successful lookups
    avg_latency: Optional[float] = None
    median_latency: Optional[float] = None
    min_latency: Optional[float] = None
    max_latency: Optional[float] = None
    p95_latency: Optional[float] = None
    stddev_latency: Optional[float] = None
    jitter_ms: Optional[float] = None

    packet_loss_pct: float = 0.0

    @property
    def total(self) -> int:
        return self.successful + self.failed

    @property
    def success_rate(self) -> float:
        """Percentage of successful lookups."""
        if self.total == 0:
            return 0.0
        return self.successful / self.total * 100

    def to_dict(self) -> dict:
        def rounded(value: Optional[float]) -> Optional[float]:
            return round(value, 3) if value is not None else None

        return {
            "dnsServer": self.dns_server,
            "successful": self.successful,
            "failed": self.failed,
            "successRatePct": round(self.success_rate, 2),
            "packetLossPct": round(self.packet_loss_pct, 2),
            "pingSpikes": self.ping_spikes,
            "downloadSpeed": rounded(self.download_speed),
            "latencyMs": {
                "avg": rounded(self.avg_latency),
                "median": rounded(self.median_latency),
                "min": rounded(self.min_latency),
                "max": rounded(self.max_latency),
                "p95": rounded(self.p95_latency),
                "stddev": rounded(self.stddev_latency),
                "jitter": rounded(self.jitter_ms),
            },
        }


def summarize(result: ResolverResult) -> ResolverSummary:
    """
    Calculate summary statistics for one resolver.

    Jitter is the mean absolute difference between consecutive samples
    within each domain; samples of different domains are not compared.
    """
    summary = ResolverSummary(
        dns_server=result.dns_server,
        successful=result.total_pings,
        failed=result.packet_loss,
        ping_spikes=result.ping_spikes,
        download_speed=result.download_speed,
        packet_loss_pct=packet_loss_pct(result),
    )

    if not result.total_pings:
        return summary

    latencies = np.array(result.latencies)
    summary.avg_latency = float(np.mean(latencies))
    summary.median_latency = float(np.median(latencies))
    summary.min_latency = float(np.min(latencies))
    summary.max_latency = float(np.max(latencies))
    summary.p95_latency = float(np.percentile(latencies, 95))
    summary.stddev_latency = float(np.std(latencies))

    diffs = [
        np.abs(np.diff(np.array(times)))
        for times in result.dns_results.values()
        if len(times) > 1
    ]
    if diffs:
        summary.jitter_ms = float(np.mean(np.concatenate(diffs)))
    else:
        summary.jitter_ms = 0.0

    return summary
