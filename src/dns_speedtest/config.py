"""
Probe settings and run defaults.
"""

from dataclasses import dataclass


DEFAULT_TEST_COUNT = 5
DEFAULT_DOWNLOAD_DURATION = 5  # seconds
DEFAULT_DOWNLOAD_URL = "http://link.testfile.org/150MB"


@dataclass
class ProbeSettings:
    """Tunables shared by the lookup and throughput probers."""
    lookup_timeout: float = 5.0        # seconds, per lookup attempt
    spike_threshold_ms: float = 50.0
    idle_timeout_headroom: float = 5.0  # seconds added to the download budget
    connect_timeout: float = 10.0
    max_redirects: int = 5

    def idle_timeout(self, max_duration_ms: float) -> float:
        """Read timeout for a download with the given budget, in seconds."""
        return max_duration_ms / 1000 + self.idle_timeout_headroom
