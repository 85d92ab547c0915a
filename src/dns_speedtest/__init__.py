"""
DNS Speed Test - find the best DNS resolver for your network.

Measures lookup latency, ping spikes, packet loss and download
throughput per resolver, and ranks them with a composite score.
"""

__version__ = "1.0.0"

from .models import ResolverResult, RunRequest
from .lookup_prober import LookupProber
from .runner import BenchmarkRunner
from .scoring import select_best
from .throughput_prober import ThroughputProber

__all__ = [
    "__version__",
    "ResolverResult",
    "RunRequest",
    "LookupProber",
    "ThroughputProber",
    "BenchmarkRunner",
    "select_best",
]
