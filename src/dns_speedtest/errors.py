"""
Exception hierarchy for DNS Speed Test.

Per-attempt and per-resolver failures are absorbed by the probers and
the runner; only orchestration-level failures reach the caller.
"""

from typing import Optional


class DNSSpeedTestError(Exception):
    """Base class for all package errors."""


class ValidationError(DNSSpeedTestError, ValueError):
    """A run request is malformed or incomplete."""


class LookupFailure(DNSSpeedTestError):
    """A single DNS lookup attempt failed."""


class InvalidResolverError(LookupFailure):
    """The resolver identifier cannot be used as a nameserver."""

    def __init__(self, resolver: str, reason: str):
        super().__init__(f"Invalid resolver {resolver!r}: {reason}")
        self.resolver = resolver


class DownloadError(DNSSpeedTestError):
    """The throughput test could not produce a speed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RunError(DNSSpeedTestError):
    """Unexpected failure while orchestrating a run."""


class ResolverBusyError(RunError):
    """The process resolver configuration is already pinned."""
